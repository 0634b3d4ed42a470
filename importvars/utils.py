"""
Path and source helpers shared by the pipeline.
"""
import os
import posixpath
import re

# ------------------------------------------------- RegExp

dynamic_import_re = re.compile(r"\bimport\s*?\(")
# A plain relative file path, e.g. ./views/foo.js
normal_importee_re = re.compile(r"^\.{1,2}/[.\-/\w]+(\.\w+)$")
ignore_comment_re = re.compile(r"/\*\s*@vite-ignore\s*\*/")

# ------------------------------------------------- function


def has_dynamic_import(code):
    """
    Naive check whether `code` may contain a dynamic import.

    Imports inside comments or strings produce false positives.
    """
    return bool(dynamic_import_re.search(code))


def is_normal_importee(importee):
    return bool(normal_importee_re.match(importee))


def normalize_path(path):
    """Use forward slashes regardless of platform."""
    return path.replace(os.sep, "/") if os.sep != "/" else path


def relativeify(path):
    """Make sure a relative path starts with ./ or ../"""
    if path == "":
        return "."
    if path in (".", "..") or path.startswith("./") or path.startswith("../"):
        return path
    return "./" + path


def relative_dir(importer, target):
    """Relative path from the importer's directory to `target`, never empty."""
    rel = normalize_path(os.path.relpath(target, os.path.dirname(importer)))
    return relativeify(rel)


def same_file(importer, relative_file):
    """Whether `relative_file` (relative to the importer's directory) is the importer."""
    importer = normalize_path(importer)
    joined = posixpath.normpath(posixpath.join(posixpath.dirname(importer), relative_file))
    return joined == posixpath.normpath(importer)


_IMPORT_CALL_RE = re.compile(r"^\s*import\s*\(([\s\S]*)\)\s*$")
_CLOSERS = {"(": ")", "[": "]", "{": "}"}


def import_argument(source):
    """
    Source text of the first argument of an `import(...)` call.

    Anything that is not an import call is returned as is:
        import(`./views/${id}.js`, { with: {} })  ->  `./views/${id}.js`
        './views/' + id                            ->  './views/' + id
    """
    match = _IMPORT_CALL_RE.match(source)
    if not match:
        return source.strip()
    inner = match.group(1)

    stack = []
    quote = None
    index = 0
    while index < len(inner):
        char = inner[index]
        if quote:
            if char == "\\":
                index += 1
            elif char == quote:
                quote = None
            elif quote == "`" and inner.startswith("${", index):
                stack.append("`")
                quote = None
                index += 1
        elif char in "'\"`":
            quote = char
        elif char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif char == "}" and stack and stack[-1] == "`":
            # End of a template interpolation
            stack.pop()
            quote = "`"
        elif stack and char == stack[-1]:
            stack.pop()
        elif char == "," and not stack:
            return inner[:index].strip()
        index += 1
    return inner.strip()
