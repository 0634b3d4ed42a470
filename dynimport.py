import argparse
import os
import sys

from pydantic import ValidationError

from compiler import (
    CallSiteKind,
    compile_call_site,
    compile_call_sites,
    render_runtime,
    set_verbose,
)
from importvars.alias import AliasResolver
from importvars.config import CONFIG_FILE, load_config, write_default_config
from importvars.errors import DynamicImportError
from importvars.normalize import normalize_glob
from importvars.to_glob import dynamic_import_to_glob
from importvars.transformer import parse_import_expression


def log(message):
    """Log informational messages to stderr."""
    print(f"\033[92m\033[1mINFO:\033[0m {message}", file=sys.stderr)


def fail(message):
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def get_config(args):
    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValidationError) as e:
        fail(f"Invalid configuration:\n{e}")
    if args.strict:
        config = config.model_copy(update={"loose": False})
    return config


def get_importer(args):
    importer = os.path.abspath(args.importer)
    if not os.path.exists(importer):
        log(f"Importer '{args.importer}' does not exist, resolving relative to its directory anyway")
    return importer


def read_sources(expressions):
    if not expressions or expressions == ["-"]:
        # Read from stdin, one call site per line
        return [line for line in sys.stdin.read().splitlines() if line.strip()]
    return expressions


def cmd_glob(args):
    config = get_config(args)
    importer = get_importer(args)
    resolver = AliasResolver.from_config(config)
    try:
        node = parse_import_expression(args.expression)
        glob = dynamic_import_to_glob(node, args.expression, resolver=lambda raw: resolver.resolve(raw, importer))
    except DynamicImportError as e:
        fail(e)

    print(f"raw:      {glob.raw}")
    print(f"glob:     {glob.glob}")
    if glob.resolved:
        rule = glob.resolved.rule
        print(f"{glob.resolved.kind}:    {rule.find} -> {rule.replacement}")
    if not glob.valid:
        print("dynamic:  no (normal import)")
        return
    for g in normalize_glob(glob.glob, config.extensions, loose=config.loose):
        print(f"  {g}")


def cmd_files(args):
    config = get_config(args)
    importer = get_importer(args)
    try:
        result = compile_call_site(args.expression, importer, config)
    except DynamicImportError as e:
        fail(e)

    if result.kind == CallSiteKind.NORMAL:
        print(result.normal)
        return
    for f in result.files:
        print(f)


def cmd_transform(args):
    config = get_config(args)
    importer = get_importer(args)
    sources = read_sources(args.expressions)
    if not sources:
        fail("No call sites given")

    log(f"Processing {len(sources)} call site(s) of {args.importer}...")
    results = compile_call_sites(sources, importer, config)

    failed = 0
    for source, item in zip(sources, results):
        if item.is_err():
            failed += 1
            print(f"✗ {source}{item.error}", file=sys.stderr)
            continue
        value = item.value
        if value.replacement:
            print(f"✓ {source}\n    -> {value.replacement}")
        elif value.warning:
            print(f"⚠️  {source}\n    left unchanged ({value.warning.value})")
        else:
            print(f"• {source}\n    left unchanged")

    runtime = render_runtime(results)
    if runtime:
        print()
        print(runtime)

    if failed:
        log(f"❌ {failed} call site(s) failed")
        sys.exit(1)


def cmd_init(args):
    if os.path.exists(CONFIG_FILE):
        fail(f"{CONFIG_FILE} already exists")
    write_default_config(CONFIG_FILE)
    log(f"Created {CONFIG_FILE}")


def main():
    parser = argparse.ArgumentParser(description="Variable dynamic import resolver")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output (sent to stderr)")
    parser.add_argument("--config", help=f"Configuration file (default: ./{CONFIG_FILE})")
    parser.add_argument("--strict", action="store_true", help="Do not match subdirectories at any depth")
    subparsers = parser.add_subparsers(dest="command")

    glob = subparsers.add_parser("glob", help="Show the glob of an import expression")
    glob.add_argument("expression", help="Import expression, e.g. \"import(`./views/${id}.js`)\"")
    glob.add_argument("--importer", required=True, help="File containing the import")

    files = subparsers.add_parser("files", help="List the files an import expression can load")
    files.add_argument("expression")
    files.add_argument("--importer", required=True, help="File containing the import")

    transform = subparsers.add_parser("transform", help="Rewrite call sites and print the runtime")
    transform.add_argument("importer", help="File containing the imports")
    transform.add_argument("expressions", nargs="*", help="Call sites (default: read from stdin, one per line)")

    subparsers.add_parser("init", help=f"Create {CONFIG_FILE}")

    args = parser.parse_args()
    set_verbose(args.verbose)

    if args.command == "glob": cmd_glob(args)
    elif args.command == "files": cmd_files(args)
    elif args.command == "transform": cmd_transform(args)
    elif args.command == "init": cmd_init(args)
    else: parser.print_help()


if __name__ == "__main__":
    main()
