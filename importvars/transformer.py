"""
Import Expression Transformer - Converts parsed source to ImportExpression trees.

This module contains the ImportExpressionTransformer class that turns Lark parse
trees of a dynamic import argument into the immutable node types of
importvars.expression, plus the parse_import_expression() entry point.
"""

import re
from functools import lru_cache

from lark import Lark, Transformer
from lark.exceptions import UnexpectedInput, VisitError

from importvars.errors import ExpressionSyntaxError
from importvars.expression import (
    ConcatCall,
    Concatenation,
    Literal,
    Other,
    TemplateLiteral,
)
from importvars.grammar import import_expression_grammar


_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")


def decode_string_literal(token):
    """Decode a quoted JavaScript string token into its value.

    "'./foo\\'s.js'" -> "./foo's.js"
    """
    body = str(token)[1:-1]

    def replace(match):
        escape = match.group(1)
        if escape.startswith("u{"):
            return chr(int(escape[2:-1], 16))
        if escape.startswith("u") and len(escape) == 5:
            return chr(int(escape[1:], 16))
        if escape.startswith("x") and len(escape) == 3:
            return chr(int(escape[1:], 16))
        if escape in ("\n", "\r\n", "\r"):
            # Line continuation
            return ""
        return _ESCAPES.get(escape, escape)

    return _ESCAPE_RE.sub(replace, body)


def describe(node):
    """Render a node back to approximate source text, for logs and messages."""
    if isinstance(node, Literal):
        return repr(node.value)
    if isinstance(node, TemplateLiteral):
        text = node.quasis[0]
        for expression, quasi in zip(node.expressions, node.quasis[1:]):
            text += "${" + describe(expression) + "}" + quasi
        return f"`{text}`"
    if isinstance(node, Concatenation):
        return f"{describe(node.left)} {node.operator} {describe(node.right)}"
    if isinstance(node, ConcatCall):
        args = ", ".join(describe(a) for a in node.arguments)
        return f"{describe(node.receiver)}.concat({args})"
    return node.source or node.kind


class ImportExpressionTransformer(Transformer):
    """
    Transforms parse tree nodes into ImportExpression nodes.

    Every binary arithmetic/relational operator becomes a Concatenation that
    records its operator, so that the glob conversion can reject anything but
    '+'. Calls are only kept structurally when they are `<receiver>.concat(...)`.
    """

    def start(self, args):
        """Unwrap the single top-level node."""
        return args[0]

    def import_call(self, args):
        """Keep the module source, drop the import options argument."""
        return args[0]

    def string(self, args):
        """Transform a quoted string to a Literal."""
        return Literal(value=decode_string_literal(args[0]))

    def number(self, args):
        """Transform a number to a Literal of its source text."""
        return Literal(value=str(args[0]))

    def template(self, args):
        """Transform a template literal, keeping the raw text of static parts."""
        if len(args) == 1:
            return TemplateLiteral(quasis=[str(args[0])[1:-1]], expressions=[])

        quasis = []
        expressions = []
        for item in args:
            if isinstance(item, str) and getattr(item, "type", None) in (
                "TEMPLATE_HEAD", "TEMPLATE_MIDDLE", "TEMPLATE_TAIL"
            ):
                text = str(item)
                # Strip the opening '`' or '}' and the closing '${' or '`'
                if item.type == "TEMPLATE_TAIL":
                    quasis.append(text[1:-1])
                else:
                    quasis.append(text[1:-2])
            else:
                expressions.append(item)
        return TemplateLiteral(quasis=quasis, expressions=expressions)

    def identifier(self, args):
        """Transform an identifier."""
        return Other(kind="Identifier", source=str(args[0]))

    def member(self, args):
        """Transform `object.name`, remembering the name for `.concat()`."""
        receiver, name = args
        return Other(
            kind="MemberExpression",
            source=f"{describe(receiver)}.{name}",
            receiver=receiver,
            member=str(name),
        )

    def computed_member(self, args):
        """Transform `object[key]`."""
        receiver, key = args
        return Other(kind="MemberExpression", source=f"{describe(receiver)}[{describe(key)}]")

    def call(self, args):
        """Transform a call; only `.concat()` keeps its structure."""
        callee = args[0]
        arguments = args[1] if len(args) > 1 else []
        if isinstance(callee, Other) and callee.member == "concat" and callee.receiver is not None:
            return ConcatCall(receiver=callee.receiver, arguments=arguments)
        rendered = ", ".join(describe(a) for a in arguments)
        return Other(kind="CallExpression", source=f"{describe(callee)}({rendered})")

    def arguments(self, args):
        """Transform call arguments."""
        return list(args)

    def binary_expr(self, args):
        """Transform a binary expression, keeping the operator."""
        left, operator, right = args
        return Concatenation(left=left, right=right, operator=str(operator))

    def logical_expr(self, args):
        """Logical expressions can evaluate to either side."""
        left, operator, right = args
        return Other(kind="LogicalExpression", source=f"{describe(left)} {operator} {describe(right)}")

    def conditional_expr(self, args):
        """Conditional expressions can evaluate to either branch."""
        test, consequent, alternate = args
        return Other(
            kind="ConditionalExpression",
            source=f"{describe(test)} ? {describe(consequent)} : {describe(alternate)}",
        )

    def unary_expr(self, args):
        """Transform a unary expression."""
        operator, operand = args
        return Other(kind="UnaryExpression", source=f"{operator}{describe(operand)}")


@lru_cache(maxsize=1)
def get_parser():
    """Build the expression parser once per process."""
    # Earley copes with the overlapping operator and template terminals
    return Lark(import_expression_grammar, parser="earley")


def parse_import_expression(source):
    """
    Parse the argument of a dynamic import (or a whole `import(...)` call).

    Args:
        source: JavaScript source text of the expression

    Returns:
        The ImportExpression tree

    Raises:
        ExpressionSyntaxError: If the text is not a supported expression
    """
    try:
        tree = get_parser().parse(source.strip())
    except UnexpectedInput as e:
        # Lark reports -1 for errors at end of input
        line = getattr(e, "line", -1)
        column = getattr(e, "column", -1)
        raise ExpressionSyntaxError(
            source,
            line_number=line if line > 0 else None,
            column=column if column > 0 else None,
        ) from e
    try:
        return ImportExpressionTransformer().transform(tree)
    except VisitError as e:
        # e.g. an escape outside the unicode range
        raise ExpressionSyntaxError(source) from e
