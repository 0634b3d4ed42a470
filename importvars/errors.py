"""
Error handling for variable dynamic imports.

Every build-time failure is a DynamicImportError tagged with an ErrorKind.
Structural and validation errors are fatal for one call site only; the batch
driver in compiler.py turns them into Err results so the remaining call sites
of the file are still processed.
"""
from enum import Enum


EXAMPLE = 'For example: import(`./foo/${bar}.js`).'


class ErrorKind(str, Enum):
    """Categorizes dynamic import failures."""
    UNSUPPORTED_OPERATOR = "UnsupportedOperator"
    WILDCARD_IN_LITERAL = "WildcardInLiteral"
    UNBOUNDED_WILDCARD = "UnboundedWildcard"
    ABSOLUTE_DYNAMIC_IMPORT = "AbsoluteDynamicImport"
    BARE_DYNAMIC_IMPORT = "BareDynamicImport"
    SELF_DIRECTORY_AMBIGUITY = "SelfDirectoryAmbiguity"
    NO_FILES_MATCHED = "NoFilesMatched"
    UNKNOWN_SPECIFIER_AT_RUNTIME = "UnknownSpecifierAtRuntime"
    EXPRESSION_SYNTAX = "ExpressionSyntax"


class DynamicImportError(Exception):
    """Dynamic import error with the offending source and a hint."""
    kind = None

    def __init__(self, message, context=None, suggestion=None, kind=None):
        self.message = message
        self.context = context  # The offending import expression
        self.suggestion = suggestion  # How to fix it
        if kind is not None:
            self.kind = kind
        super().__init__(message)

    def with_context(self, context):
        """Attach the source text of the call site if none is set yet."""
        if self.context is None:
            self.context = context
        return self

    def _format_error(self):
        """Format the error message with context and suggestion."""
        lines = ["\n❌ Dynamic Import Error"]
        if self.kind is not None:
            lines.append(f" ({self.kind.value})")
        lines.append(":\n")

        lines.append(f"   {self.message}\n")

        if self.context:
            lines.append(f'   > "{self.context}"\n')

        if self.suggestion:
            lines.append(f"   💡 {self.suggestion}\n")

        return "".join(lines)

    def __str__(self):
        return self._format_error()


class UnsupportedOperatorError(DynamicImportError):
    kind = ErrorKind.UNSUPPORTED_OPERATOR

    def __init__(self, operator, context=None):
        self.operator = operator
        super().__init__(f"{operator} operator is not supported.", context=context,
                         suggestion="Only '+' can join the parts of a dynamic import path")


class WildcardCharacterError(DynamicImportError):
    kind = ErrorKind.WILDCARD_IN_LITERAL

    def __init__(self, fragment, context=None):
        self.fragment = fragment
        super().__init__("A dynamic import cannot contain * characters.", context=context,
                         suggestion=EXAMPLE)


class UnboundedWildcardError(DynamicImportError):
    kind = ErrorKind.UNBOUNDED_WILDCARD

    def __init__(self, source):
        super().__init__(
            f'invalid import "{source}". It cannot be statically analyzed. '
            "Variable dynamic imports must start with ./ and be limited to a specific directory.",
            context=source,
            suggestion=EXAMPLE,
        )


class AbsoluteImportError(DynamicImportError):
    kind = ErrorKind.ABSOLUTE_DYNAMIC_IMPORT

    def __init__(self, source):
        super().__init__(
            f'invalid import "{source}". Variable absolute imports are not supported, '
            "imports must start with ./ in the static part of the import.",
            context=source,
            suggestion=EXAMPLE,
        )


class BareImportError(DynamicImportError):
    kind = ErrorKind.BARE_DYNAMIC_IMPORT

    def __init__(self, source):
        super().__init__(
            f'invalid import "{source}". Variable bare imports are not supported, '
            "imports must start with ./ in the static part of the import.",
            context=source,
            suggestion="Configure an alias for the prefix or install the package under node_modules",
        )


class SelfDirectoryImportError(DynamicImportError):
    kind = ErrorKind.SELF_DIRECTORY_AMBIGUITY

    def __init__(self, source):
        super().__init__(
            f'invalid import "{source}". Variable imports cannot import their own directory, '
            "place imports in a separate directory or make the import filename more specific.",
            context=source,
            suggestion=EXAMPLE,
        )


class ExpressionSyntaxError(DynamicImportError):
    kind = ErrorKind.EXPRESSION_SYNTAX

    def __init__(self, source, line_number=None, column=None):
        self.line_number = line_number
        self.column = column
        where = ""
        if line_number:
            where = f" at line {line_number}"
            if column:
                where += f", column {column}"
        super().__init__(f"Syntax error in import expression{where}", context=source,
                         suggestion="Check syntax around this expression")


class UnknownSpecifierError(DynamicImportError):
    """Raised when a dispatch table is asked for a specifier it never registered."""
    kind = ErrorKind.UNKNOWN_SPECIFIER_AT_RUNTIME

    def __init__(self, path):
        self.path = path
        super().__init__("Unknown variable dynamic import: " + path)

    def __str__(self):
        return self.message
