import asyncio
import os
import sys
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from importvars.alias import AliasResolver
from importvars.config import DynamicImportConfig
from importvars.dispatch import DispatchTable, build_dispatch_table
from importvars.errors import DynamicImportError, ErrorKind
from importvars.expression import Literal
from importvars.files import enumerate_files
from importvars.normalize import normalize_glob
from importvars.result import Err, Ok
from importvars.runtime import TAG, render_runtime_block, runtime_name
from importvars.to_glob import GlobPattern, dynamic_import_to_glob
from importvars.transformer import describe, parse_import_expression
from importvars.utils import (
    has_dynamic_import,
    ignore_comment_re,
    import_argument,
    is_normal_importee,
)

# Global verbose flag
_VERBOSE = False


def set_verbose(value):
    """Set the global verbose flag."""
    global _VERBOSE
    _VERBOSE = value


def debug_log(message):
    """Log a debug message to stderr if verbose mode is enabled."""
    if _VERBOSE:
        print(f"\033[94mDEBUG:\033[0m {message}", file=sys.stderr)


def warn(message):
    """Log a warning to stderr."""
    print(f"{TAG} \033[33m{message}\033[0m", file=sys.stderr)


class CallSiteKind(str, Enum):
    DISPATCH = "dispatch"  # rewritten to a runtime dispatch function
    NORMAL = "normal"      # a fixed path, plain import
    SKIPPED = "skipped"    # left as written


class CallSiteResult(BaseModel):
    """Outcome of one dynamic import call site."""
    source: str
    argument: str
    importer: str
    kind: CallSiteKind
    glob: Optional[GlobPattern] = None
    globs: List[str] = []
    files: List[str] = []
    table: Optional[DispatchTable] = None
    # Fixed path of a normal import
    normal: Optional[str] = None
    runtime_name: Optional[str] = None
    runtime: Optional[str] = None
    # New text for the call site, None when it stays as written
    replacement: Optional[str] = None
    warning: Optional[ErrorKind] = None

    def with_runtime(self, index):
        """Name the dispatch function of this call site."""
        name = runtime_name(index)
        return self.model_copy(update={
            "runtime_name": name,
            "runtime": self.table.render(name),
            "replacement": f"{name}({self.argument})",
        })


def should_transform(importer, code, config=None):
    """Whether a module may contain call sites worth processing."""
    config = config or DynamicImportConfig()
    _, ext = os.path.splitext(importer.split("?", 1)[0])
    if ext not in config.extensions:
        return False
    if not has_dynamic_import(code):
        return False

    user_condition = config.filter(importer) if config.filter else None
    if user_condition is False:
        return False
    # Exclude node_modules by default
    if user_condition is not True and not config.include_node_modules and "node_modules" in importer:
        return False
    return True


def compile_call_site(source, importer, config=None, resolver=None, matcher=None):
    """
    Resolve one dynamic import call site.

    Args:
        source: The `import(...)` call, or only its argument
        importer: Absolute path of the importing file
        config: DynamicImportConfig
        resolver: AliasResolver, built from config when omitted
        matcher: Glob-matching primitive for enumerate_files()

    Returns:
        CallSiteResult (without runtime name; see number_runtimes())

    Raises:
        DynamicImportError: If the call site cannot be converted
    """
    config = config or DynamicImportConfig()
    resolver = resolver or AliasResolver.from_config(config)
    argument = import_argument(source)

    def result(kind, **fields):
        return CallSiteResult(source=source, argument=argument, importer=importer, kind=kind, **fields)

    # Skip /* @vite-ignore */
    if ignore_comment_re.search(source):
        debug_log(f"Ignored: {source}")
        return result(CallSiteKind.SKIPPED)

    # User custom importee
    if config.on_resolve:
        argument = config.on_resolve(argument, importer) or argument

    node = parse_import_expression(argument)
    debug_log(f"Parsed {type(node).__name__}: {describe(node)}")

    if isinstance(node, Literal):
        # Normal importee
        if is_normal_importee(node.value):
            return result(CallSiteKind.NORMAL, normal=node.value)
        # Alias or bare module pointing at one file
        resolved = resolver.resolve(node.value, importer)
        if resolved and is_normal_importee(resolved.resolved):
            debug_log(f"Resolved {resolved.kind} '{node.value}' -> '{resolved.resolved}'")
            return result(
                CallSiteKind.NORMAL,
                normal=resolved.resolved,
                replacement=f'import("{resolved.resolved}")',
            )

    glob = dynamic_import_to_glob(node, source, resolver=lambda raw: resolver.resolve(raw, importer))
    debug_log(f"Glob: '{glob.raw}' -> '{glob.glob}' (valid={glob.valid})")

    if not glob.valid:
        # The expression reduced to a fixed path
        if is_normal_importee(glob.glob):
            return result(
                CallSiteKind.NORMAL,
                glob=glob,
                normal=glob.glob,
                replacement=f'import("{glob.glob}")',
            )
        return result(CallSiteKind.SKIPPED, glob=glob)

    globs = normalize_glob(glob.glob, config.extensions, loose=config.loose)
    debug_log(f"Normalized globs: {globs}")

    files = enumerate_files(globs, importer, matcher)
    if config.on_files:
        # None keeps the matched files, an empty list excludes them all
        filtered = config.on_files(files, importer)
        if filtered is not None:
            files = list(filtered)
    debug_log(f"Matched {len(files)} file(s)")

    if not files:
        warn(f"no files matched: {source}\n  file: {importer}")
        return result(CallSiteKind.SKIPPED, glob=glob, globs=globs, warning=ErrorKind.NO_FILES_MATCHED)

    table = build_dispatch_table(files, glob.resolved)
    for collision in table.collisions:
        debug_log(f"'{collision.specifier}' already maps to {collision.kept}, {collision.dropped} not registered")

    return result(CallSiteKind.DISPATCH, glob=glob, globs=globs, files=files, table=table)


def number_runtimes(results):
    """Name the dispatch functions of one file in source order."""
    numbered = []
    index = 0
    for item in results:
        if item.is_ok() and item.value.kind == CallSiteKind.DISPATCH:
            item = Ok(item.value.with_runtime(index))
            index += 1
        numbered.append(item)
    return numbered


async def compile_call_sites_async(sources, importer, config=None, matcher=None):
    """
    Process every dynamic import call site of one file concurrently.

    Returns one Ok(CallSiteResult) or Err(DynamicImportError) per source, in
    source order. A failing call site does not affect the others.
    """
    config = config or DynamicImportConfig()
    resolver = AliasResolver.from_config(config)

    async def run(source):
        try:
            value = await asyncio.to_thread(compile_call_site, source, importer, config, resolver, matcher)
        except DynamicImportError as e:
            debug_log(f"{e.kind.value}: {e.message}")
            return Err(e)
        return Ok(value)

    results = await asyncio.gather(*(run(source) for source in sources))
    return number_runtimes(results)


def compile_call_sites(sources, importer, config=None, matcher=None):
    """Synchronous wrapper around compile_call_sites_async()."""
    return asyncio.run(compile_call_sites_async(sources, importer, config, matcher))


def render_runtime(results):
    """The runtime block to append to the transformed file."""
    return render_runtime_block([
        item.value.runtime
        for item in results
        if item.is_ok() and item.value.runtime
    ])
