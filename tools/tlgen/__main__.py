"""
CLI entry point for tlgen.

Usage:
    python3 -m tools.tlgen td_api.tl gen/ --package com.example.tdlib --base TdObject
    python3 -m tools.tlgen td_api.tl gen/ --config tlgen.yaml --layout domain-mapping-split
"""

import argparse
import os
import shutil
import sys

from .config import LAYOUTS, ValidationError, load_config
from .generator import generate, summarize
from .log import configure_logging, get_logger
from .parser import MalformedSchema
from .types import UnresolvedType

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tlgen", description="TL schema to Kotlin domain-model generator")
    parser.add_argument("schema", help="Input .tl schema file")
    parser.add_argument("outdir", help="Output directory")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("-p", "--package", help="Root package (default: com.example.tdlib)")
    parser.add_argument("-b", "--base", help="Base interface of every model (default: TdObject)")
    parser.add_argument("--layout", choices=LAYOUTS, help="Output layout")
    parser.add_argument("--no-mappers", action="store_true",
                        help="Do not generate toModel() adapters")
    parser.add_argument("--clean", action="store_true",
                        help="Remove the output directory before writing")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def write_files(files, outdir: str):
    for gen in files:
        path = os.path.join(outdir, *gen.relative_path.split("/"))
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:
            f.write(gen.content)
        logger.debug("wrote %s", path)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)

    if not os.path.isfile(args.schema):
        print(f"schema not found: {os.path.abspath(args.schema)}", file=sys.stderr)
        return 1

    try:
        config = load_config(args.config).override(
            package_name=args.package,
            base_class=args.base,
            layout=args.layout,
            emit_mappers=False if args.no_mappers else None,
        )
    except (OSError, ValidationError) as e:
        print(f"invalid configuration: {e}", file=sys.stderr)
        return 1

    print(f"schema  : {os.path.abspath(args.schema)}")
    print(f"output  : {os.path.abspath(args.outdir)}")
    print(f"package : {config.package_name}")
    print(f"base    : {config.base_class}")
    print(f"layout  : {config.layout}")
    print()

    with open(args.schema) as f:
        text = f.read()

    # Everything is generated before the output directory is touched.
    try:
        files = generate(text, config)
    except (MalformedSchema, UnresolvedType) as e:
        print(f"failed: {e}", file=sys.stderr)
        return 1

    if args.clean and os.path.isdir(args.outdir):
        shutil.rmtree(args.outdir)
    write_files(files, args.outdir)

    print(f"Generated {len(files)} files")
    for directory, count in summarize(files).items():
        print(f"  {directory + '/':<18} {count} files")
    return 0


if __name__ == "__main__":
    sys.exit(main())
