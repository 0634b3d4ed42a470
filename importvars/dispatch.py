"""
Dispatch tables for variable dynamic imports.

Every matched file is registered under each literal specifier the original
expression could have produced for it. For `./foo/index.js` imported through
the alias `@`:

    @/foo           -> ./foo/index.js
    @/foo/index     -> ./foo/index.js
    @/foo/index.js  -> ./foo/index.js

When two files produce the same specifier the first registered file keeps it
and the collision is recorded.
"""
import inspect
import posixpath
from typing import Dict, List, Optional

from pydantic import BaseModel

from importvars.alias import ResolvedAlias
from importvars.errors import UnknownSpecifierError
from importvars.runtime import render_dispatch_function


class Collision(BaseModel):
    specifier: str
    kept: str
    dropped: str


class DispatchTable(BaseModel):
    """Specifier -> file lookup for one call site, in registration order."""
    entries: Dict[str, str] = {}
    files: List[str] = []
    collisions: List[Collision] = []

    def lookup(self, specifier) -> Optional[str]:
        return self.entries.get(specifier)

    def specifiers_for(self, file) -> List[str]:
        return [s for s, target in self.entries.items() if target == file]

    async def import_module(self, specifier, loader=None):
        """
        Python rendition of the emitted runtime function.

        Resolves to `loader(file)` (or the file itself) for a registered
        specifier; any other specifier is rejected when awaited, never at
        call time.
        """
        target = self.entries.get(specifier)
        if target is None:
            raise UnknownSpecifierError(specifier)
        if loader is None:
            return target
        result = loader(target)
        if inspect.isawaitable(result):
            result = await result
        return result

    def render(self, name) -> str:
        """JavaScript source of the dispatch function `name`."""
        return render_dispatch_function(name, list(self.entries.items()))


def candidate_specifiers(file, resolved: Optional[ResolvedAlias] = None) -> List[str]:
    """
    Literal specifiers that may designate `file` at runtime.

    ./foo/index.js -> ./foo, ./foo/index, ./foo/index.js
    """
    importee = resolved.to_specifier(file) if resolved else file
    ext = posixpath.splitext(importee)[1]

    candidates = []
    if ext and importee.endswith("/index" + ext):
        candidates.append(importee[: -len("/index" + ext)])
    if ext:
        candidates.append(importee[: -len(ext)])
    candidates.append(importee)
    return candidates


def build_dispatch_table(files, resolved: Optional[ResolvedAlias] = None) -> DispatchTable:
    """
    Build the lookup for one call site.

    Args:
        files: Matched files, relative to the importer, in match order
        resolved: The alias resolution of the call site, if any

    Returns:
        DispatchTable; on collisions the first registered file wins
    """
    entries: Dict[str, str] = {}
    collisions: List[Collision] = []
    for file in files:
        for specifier in candidate_specifiers(file, resolved):
            kept = entries.get(specifier)
            if kept is None:
                entries[specifier] = file
            elif kept != file:
                collisions.append(Collision(specifier=specifier, kept=kept, dropped=file))
    return DispatchTable(entries=entries, files=list(files), collisions=collisions)
