# Variable dynamic imports - Core Components
"""
Core modules for resolving variable dynamic imports:
- errors: Error taxonomy of rejected call sites
- expression: ImportExpression node types
- grammar: Lark grammar for the import argument
- transformer: Parse tree to ImportExpression transformation
- to_glob: Expression to glob conversion and validation
- alias: Alias and bare-module (node_modules) resolution
- normalize: Glob normalization (slash, depth, extension)
- files: Glob execution relative to the importer
- dispatch: Specifier -> module dispatch tables
- runtime: JavaScript runtime for dispatch functions
- config: Build configuration
- result: Ok / Err outcome of one call site
"""

from .errors import DynamicImportError, ErrorKind
from .expression import ConcatCall, Concatenation, Literal, Other, TemplateLiteral
from .transformer import parse_import_expression
from .to_glob import GlobPattern, dynamic_import_to_glob, expression_to_glob
from .alias import AliasResolver, ResolvedAlias
from .normalize import normalize_glob
from .files import enumerate_files
from .dispatch import DispatchTable, build_dispatch_table
from .config import AliasRule, DynamicImportConfig, load_config

__all__ = [
    'DynamicImportError',
    'ErrorKind',
    'ConcatCall',
    'Concatenation',
    'Literal',
    'Other',
    'TemplateLiteral',
    'parse_import_expression',
    'GlobPattern',
    'dynamic_import_to_glob',
    'expression_to_glob',
    'AliasResolver',
    'ResolvedAlias',
    'normalize_glob',
    'enumerate_files',
    'DispatchTable',
    'build_dispatch_table',
    'AliasRule',
    'DynamicImportConfig',
    'load_config',
]
