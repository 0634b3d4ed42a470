"""
Configuration for dynamic import resolution.

The alias table and the resolvable extensions come from build configuration.
They are loaded once per build and never mutated by the pipeline.
"""
import json
import os
import re
from typing import Any, Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


CONFIG_FILE = "dynimport.json"
USER_CONFIG_FILE = os.path.join("~", ".dynimport", "config.json")

DEFAULT_EXTENSIONS = [".mjs", ".js", ".mts", ".ts", ".jsx", ".tsx", ".json"]


class AliasRule(BaseModel):
    """
    One alias: `find` is substituted by `replacement`.

    A literal `find` matches specifiers starting with `find + "/"`; with
    `regex=True` it is searched as a regular expression.
    """
    model_config = ConfigDict(frozen=True)

    find: str
    replacement: str
    regex: bool = False

    @model_validator(mode="before")
    @classmethod
    def _accept_compiled_pattern(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("find"), re.Pattern):
            data = dict(data)
            data["find"] = data["find"].pattern
            data["regex"] = True
        return data

    @property
    def pattern(self):
        return re.compile(self.find) if self.regex else None

    def match(self, specifier):
        """Return (start, end) of the aliased part of `specifier`, or None."""
        if self.regex:
            found = self.pattern.search(specifier)
            return found.span() if found else None
        if specifier.startswith(self.find + "/"):
            return 0, len(self.find)
        return None


class DynamicImportConfig(BaseModel):
    """Build configuration consumed by the pipeline."""
    model_config = ConfigDict(frozen=True)

    root: str = "."
    alias: List[AliasRule] = []
    extensions: List[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    # Match subdirectories as far as possible (webpack-like); False behaves
    # like @rollup/plugin-dynamic-import-vars
    loose: bool = True
    include_node_modules: bool = False

    filter: Optional[Callable[[str], Optional[bool]]] = Field(default=None, exclude=True)
    on_files: Optional[Callable[[List[str], str], Optional[List[str]]]] = Field(default=None, exclude=True)
    on_resolve: Optional[Callable[[str, str], Optional[str]]] = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def _dotted_extensions(self):
        for ext in self.extensions:
            if not ext.startswith("."):
                raise ValueError(f"extension '{ext}' must start with '.'")
        return self


def load_config(path=None):
    """
    Load the configuration file.

    Looks at `path`, then ./dynimport.json, then ~/.dynimport/config.json.
    Falls back to the defaults when none exists. A relative `root` is taken
    relative to the directory of the file it was read from.
    """
    paths = [path] if path else [CONFIG_FILE, os.path.expanduser(USER_CONFIG_FILE)]
    for p in paths:
        if os.path.exists(p):
            with open(p, "r") as f:
                data = json.load(f)
            root = data.get("root", ".")
            if not os.path.isabs(root):
                data["root"] = os.path.normpath(os.path.join(os.path.dirname(os.path.abspath(p)), root))
            return DynamicImportConfig.model_validate(data)
    if path:
        raise FileNotFoundError(f"Config not found: {path}")
    return DynamicImportConfig()


def write_default_config(path=CONFIG_FILE):
    """Write a starter configuration file and return its contents."""
    config = {
        "root": ".",
        "alias": [
            {"find": "@", "replacement": os.path.abspath("src")},
        ],
        "extensions": DEFAULT_EXTENSIONS,
        "loose": True,
    }
    with open(path, "w") as f:
        json.dump(config, f, indent=2)
    return config
