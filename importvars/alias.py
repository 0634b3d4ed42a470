"""
Alias and bare-module resolution.

Rewrites the static head of an import specifier into a path relative to the
importer, either through a configured alias or through node_modules:

    @/views/*.js                  -> ./views/*.js
    @ant-design/icons/es/*        -> ../node_modules/@ant-design/icons/es/*

The matched rule travels with the result (ResolvedAlias) so that later steps
never have to guess which alias produced a path.
"""
import os
import re
from typing import Callable, Literal, Optional

from pydantic import BaseModel

from importvars.config import AliasRule
from importvars.utils import normalize_path, relative_dir

_RELATIVE_OR_ABSOLUTE_RE = re.compile(r"^[./]")


class ResolvedAlias(BaseModel):
    """
    A specifier rewritten by one rule.

    `specifier` starts with `specifier_head` and `resolved` starts with
    `resolved_head`; swapping the heads converts between the two forms.
    """
    kind: Literal["alias", "bare"]
    rule: AliasRule
    importer: str
    specifier: str
    resolved: str
    specifier_head: str
    resolved_head: str

    def to_specifier(self, path):
        """Re-express a resolved relative path in the form the caller wrote."""
        if path.startswith(self.resolved_head):
            return self.specifier_head + path[len(self.resolved_head):]
        return path


class AliasResolver:
    """
    Resolves alias and bare (node_modules) specifiers to relative paths.

    The rule table is read-only; every call produces a fresh ResolvedAlias.
    """

    def __init__(self, rules=(), root=".", exists: Optional[Callable[[str], bool]] = None):
        """
        Args:
            rules: Ordered AliasRule table, first match wins
            root: Project root containing node_modules
            exists: Directory probe used for bare modules (default os.path.isdir)
        """
        self.rules = tuple(rules)
        self.node_modules = os.path.join(os.path.abspath(root), "node_modules")
        self.exists = exists or os.path.isdir

    @classmethod
    def from_config(cls, config, exists=None):
        return cls(config.alias, root=config.root, exists=exists)

    def resolve(self, specifier, importer) -> Optional[ResolvedAlias]:
        """Resolve through the alias table, then through node_modules."""
        return self.resolve_alias(specifier, importer) or self.resolve_bare(specifier, importer)

    def resolve_alias(self, specifier, importer) -> Optional[ResolvedAlias]:
        for rule in self.rules:
            span = rule.match(specifier)
            if span is not None:
                return self._apply(rule, span, specifier, importer, "alias")
        return None

    def resolve_bare(self, specifier, importer) -> Optional[ResolvedAlias]:
        # It's a relative or absolute path
        if _RELATIVE_OR_ABSOLUTE_RE.match(specifier):
            return None

        # Keep the deepest existing directory: the package root or one of its subdirs
        find = None
        level = ""
        for segment in specifier.split("/"):
            if not segment:
                break
            level = f"{level}/{segment}" if level else segment
            if self.exists(os.path.join(self.node_modules, level)):
                find = level
        if find is None:
            return None

        replacement = relative_dir(importer, self.node_modules) + "/" + find
        # Fake the bare module as an alias whose replacement is a relative path
        rule = AliasRule(find=find, replacement=replacement)
        return self._apply(rule, (0, len(find)), specifier, importer, "bare")

    def _apply(self, rule, span, specifier, importer, kind):
        start, end = span
        before, after = specifier[:start], specifier[end:]

        if rule.replacement.startswith("."):
            # Relative path, substitute textually
            resolved_head = before + rule.replacement
            specifier_head = specifier[:end]
            resolved = resolved_head + after
        else:
            # The replacement is usually a directory, so is relative to the importer's directory
            rel = relative_dir(importer, normalize_path(rule.replacement))
            rest = before + after
            stripped = rest[1:] if rest.startswith("/") else rest
            resolved = rel + "/" + stripped
            resolved_head = rel + "/"
            if start == 0:
                specifier_head = specifier[: len(specifier) - len(stripped)]
            else:
                # Unanchored pattern: the heads cannot be swapped back
                specifier_head = resolved_head = ""

        return ResolvedAlias(
            kind=kind,
            rule=rule,
            importer=importer,
            specifier=specifier,
            resolved=resolved,
            specifier_head=specifier_head,
            resolved_head=resolved_head,
        )
