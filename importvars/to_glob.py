"""
Conversion of dynamic import expressions into glob patterns.

    import(`./views/${name}.js`)     -> ./views/*.js
    import('./views/' + name)        -> ./views/*
    import('./views/'.concat(name))  -> ./views/*
    import('./views/' + 'foo.js')    -> ./views/foo.js (not dynamic)
"""
import re
from typing import Callable, Optional

from pydantic import BaseModel

from importvars.alias import ResolvedAlias
from importvars.errors import (
    AbsoluteImportError,
    BareImportError,
    DynamicImportError,
    SelfDirectoryImportError,
    UnboundedWildcardError,
    UnsupportedOperatorError,
    WildcardCharacterError,
)
from importvars.expression import (
    ConcatCall,
    Concatenation,
    Literal,
    TemplateLiteral,
)

WILDCARD = "*"

_WILDCARD_RUN_RE = re.compile(r"\*{2,}")
_OWN_DIRECTORY_STAR_EXTENSION_RE = re.compile(r"^\./\*\.\w+$")


class GlobPattern(BaseModel):
    """The glob for one call site.

    `valid` is False when the expression reduced to a fixed path (or a data:
    URI); `glob` then holds that path and the call site is a normal import.
    """
    glob: str
    valid: bool
    raw: str
    resolved: Optional[ResolvedAlias] = None


def sanitize_string(value):
    if WILDCARD in value:
        raise WildcardCharacterError(value)
    return value


def expression_to_glob(node):
    """Recursively convert an import expression into a (raw) glob string."""
    match node:
        case Literal(value=value):
            return sanitize_string(value)
        case TemplateLiteral(quasis=quasis, expressions=expressions):
            glob = ""
            for index, quasi in enumerate(quasis):
                glob += sanitize_string(quasi)
                if index < len(expressions):
                    glob += expression_to_glob(expressions[index])
            return glob
        case Concatenation(operator=operator, left=left, right=right):
            if operator != "+":
                raise UnsupportedOperatorError(operator)
            return expression_to_glob(left) + expression_to_glob(right)
        case ConcatCall(receiver=receiver, arguments=arguments):
            return expression_to_glob(receiver) + "".join(expression_to_glob(a) for a in arguments)
        case _:
            return WILDCARD


def collapse_wildcards(glob):
    """`**` -> `*`; depth wildcards are only introduced by normalization."""
    return _WILDCARD_RUN_RE.sub(WILDCARD, glob)


def is_dynamic(glob):
    return WILDCARD in glob and not glob.startswith("data:")


def validate_glob(glob, source):
    """Reject globs that cannot be bounded to a directory relative to the importer."""
    if glob.startswith("*"):
        raise UnboundedWildcardError(source)

    if glob.startswith("/"):
        raise AbsoluteImportError(source)

    if not glob.startswith("./") and not glob.startswith("../"):
        raise BareImportError(source)

    # Disallow ./*.ext
    if _OWN_DIRECTORY_STAR_EXTENSION_RE.match(glob):
        raise SelfDirectoryImportError(source)


def dynamic_import_to_glob(
    node,
    source: str,
    resolver: Optional[Callable[[str], Optional[ResolvedAlias]]] = None,
) -> GlobPattern:
    """
    Turn the argument of a dynamic import into a validated glob.

    Args:
        node: The ImportExpression of the call site
        source: Source text of the call site, quoted in error messages
        resolver: Optional alias resolver; called with the raw glob and returns
            a ResolvedAlias (or None) whose rewritten path replaces the glob

    Returns:
        GlobPattern, with valid=False when the expression is not dynamic

    Raises:
        DynamicImportError: One subclass per rejected shape
    """
    try:
        raw = expression_to_glob(node)
    except DynamicImportError as e:
        raise e.with_context(source)

    resolved = resolver(raw) if resolver else None
    glob = resolved.resolved if resolved else raw

    if not is_dynamic(glob):
        # After the conversion, it may be a normal path
        return GlobPattern(glob=glob, valid=False, raw=raw, resolved=resolved)

    glob = collapse_wildcards(glob)
    validate_glob(glob, source)

    return GlobPattern(glob=glob, valid=True, raw=raw, resolved=resolved)
