# Dynamic import runtime
"""
JavaScript runtime emitted next to rewritten call sites.

The template is a real .js file so it can be linted and read on its own; it is
filled in with one lookup table per call site at build time.
"""

import json
import os

TAG = "[dynimport-vars]"
RUNTIME_PREFIX = "__variableDynamicImportRuntime"


def runtime_name(index):
    """Name of the dispatch function of the `index`-th dynamic call site of a file."""
    return f"{RUNTIME_PREFIX}{index}__"


def get_runtime_template():
    """Read the dispatch function template."""
    path = os.path.join(os.path.dirname(__file__), "dispatch.js")
    with open(path, "r") as f:
        return f.read()


def render_dispatch_function(name, entries):
    """
    Render one dispatch function.

    Args:
        name: Function name
        entries: Ordered (specifier, target file) pairs; specifiers are unique

    Returns:
        JavaScript source of the function
    """
    lines = [
        f"    {json.dumps(specifier)}: function () {{ return import({json.dumps(target)}); }},"
        for specifier, target in entries
    ]
    return (
        get_runtime_template()
        .replace("__RUNTIME_NAME__", name)
        .replace("__MODULES__", "\n".join(lines))
        .rstrip("\n")
    )


def render_runtime_block(functions):
    """Wrap the dispatch functions of one file between marker comments."""
    if not functions:
        return ""
    return "\n".join([f"// {TAG} runtime -S-", *functions, f"// {TAG} runtime -E-"])
