"""
Import Expression Grammar Definition.

This module contains the Lark grammar for the argument of a dynamic
`import()` call. It covers the JavaScript expression subset that can appear
there; it is not a full JavaScript grammar.
"""

import_expression_grammar = r"""
    start: import_call | expr

    // --- Call site ---
    import_call: "import" "(" expr ("," expr)? ","? ")"

    // --- Expressions ---
    ?expr: conditional
    ?conditional: logical
        | logical "?" expr ":" expr -> conditional_expr
    ?logical: relational
        | logical LOGICAL_OP relational -> logical_expr
    ?relational: additive
        | relational RELATIONAL_OP additive -> binary_expr
    ?additive: multiplicative
        | additive ADDITIVE_OP multiplicative -> binary_expr
    ?multiplicative: unary
        | multiplicative MULTIPLICATIVE_OP unary -> binary_expr
    ?unary: postfix
        | UNARY_OP unary -> unary_expr
    ?postfix: primary
        | postfix "." NAME -> member
        | postfix "[" expr "]" -> computed_member
        | postfix "(" arguments? ")" -> call
    arguments: expr ("," expr)* ","?

    ?primary: string
        | template
        | NUMBER -> number
        | NAME -> identifier
        | "(" expr ")"

    string: SQ_STRING | DQ_STRING

    template: NO_SUBSTITUTION_TEMPLATE
        | TEMPLATE_HEAD expr (TEMPLATE_MIDDLE expr)* TEMPLATE_TAIL

    // --- Terminals ---
    SQ_STRING: /'(?:[^'\\\n]|\\[\s\S])*'/
    DQ_STRING: /"(?:[^"\\\n]|\\[\s\S])*"/

    NO_SUBSTITUTION_TEMPLATE: /`(?:[^`\\$]|\\[\s\S]|\$(?!\{))*`/
    TEMPLATE_HEAD: /`(?:[^`\\$]|\\[\s\S]|\$(?!\{))*\$\{/
    TEMPLATE_MIDDLE: /\}(?:[^`\\$]|\\[\s\S]|\$(?!\{))*\$\{/
    TEMPLATE_TAIL: /\}(?:[^`\\$]|\\[\s\S]|\$(?!\{))*`/

    NUMBER: /\d+(\.\d+)?/
    NAME: /(?!(?:import|typeof|void|delete|await)\b)[a-zA-Z_$][\w$]*/

    LOGICAL_OP: "&&" | "||" | "??"
    RELATIONAL_OP: "===" | "!==" | "==" | "!=" | ">=" | "<=" | ">" | "<"
    ADDITIVE_OP: "+" | "-"
    MULTIPLICATIVE_OP: "*" | "/" | "%"
    UNARY_OP: "!" | "-" | "+" | "~" | "typeof" | "void" | "delete" | "await"

    COMMENT_1: /\/\/[^\n]*/
    BLOCK_COMMENT: /\/\*[\s\S]*?\*\//

    %import common.WS
    %ignore WS
    %ignore COMMENT_1
    %ignore BLOCK_COMMENT
"""
