"""
File enumeration for normalized globs.

Globs are matched relative to the importing file's directory. Results are
relative paths starting with ./ or ../, de-duplicated (first occurrence wins)
and never include the importer itself.
"""
import glob as globlib
import os
import re

from importvars.utils import normalize_path, relativeify, same_file

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern):
    """
    Expand `{a,b}` alternations, which the glob module does not support.

    ./views/*.{js,ts} -> [./views/*.js, ./views/*.ts]
    """
    match = _BRACE_RE.search(pattern)
    if not match:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end():]
    expanded = []
    for option in match.group(1).split(","):
        for item in expand_braces(head + option + tail):
            if item not in expanded:
                expanded.append(item)
    return expanded


def match_files(patterns, cwd):
    """
    Default glob-matching primitive: files (not directories) matching any of
    `patterns` under `cwd`. `**` spans any number of directories, including
    none; dot files are not matched by wildcards.
    """
    files = []
    for pattern in patterns:
        matched = []
        for expanded in expand_braces(pattern):
            for path in globlib.glob(expanded, root_dir=cwd, recursive=True):
                if os.path.isfile(os.path.join(cwd, path)):
                    matched.append(normalize_path(path))
        files.extend(sorted(set(matched)))
    return files


def enumerate_files(globs, importer, matcher=None):
    """
    Run the globs for one call site.

    Args:
        globs: Normalized globs, relative to the importer
        importer: Absolute path of the importing file
        matcher: Glob-matching primitive `(patterns, cwd) -> paths`,
            defaults to match_files()

    Returns:
        Relative file paths in match order
    """
    matcher = matcher or match_files
    cwd = os.path.dirname(importer)

    files = []
    for path in matcher(list(globs), cwd):
        path = relativeify(normalize_path(path))
        # A dynamic import never resolves to its own source file
        if same_file(importer, path):
            continue
        if path not in files:
            files.append(path)
    return files
