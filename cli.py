#!/usr/bin/env python3
import argparse
import sys

import yaml

from md2rtf.orchestrator import run_once


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Combine Markdown files into a single RTF document")
    parser.add_argument("--config", required=True, help="Path to YAML config")
    parser.add_argument("--input", dest="input_path", help="ZIP archive or directory of .md files")
    # selection
    parser.add_argument("--search", dest="search", help="Only include entries whose name or path contains this text")
    parser.add_argument("--sort-by", dest="sort_by", choices=["name", "size", "path"], help="Document order in the output")
    parser.add_argument("--desc", dest="descending", action="store_true", help="Sort descending")
    parser.add_argument("--asc", dest="descending", action="store_false", help="Sort ascending")
    parser.add_argument("--exclude", dest="exclude", action="append", metavar="PATH", help="Deselect an entry by path (repeatable)")
    # processing
    parser.add_argument("--optimize", dest="optimize", action="store_true", help="Dedup, normalize and optimize the RTF output")
    parser.add_argument("--no-optimize", dest="optimize", action="store_false", help="Render documents exactly as given")
    parser.add_argument("--workers", dest="workers", type=int, help="Render documents on this many threads")
    # output
    parser.add_argument("--output-dir", dest="output_dir", help="Directory for the generated files")
    parser.add_argument("--filename", dest="filename", help="Output file name (.rtf is appended when missing)")
    parser.add_argument("--stats", dest="write_stats", action="store_true", help="Write the optimization stats JSON")
    parser.add_argument("--no-stats", dest="write_stats", action="store_false", help="Skip the optimization stats JSON")
    parser.set_defaults(descending=None, optimize=None, write_stats=None)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    overrides = {
        "input_path": args.input_path,
        "search": args.search,
        "sort_by": args.sort_by,
        "descending": args.descending,
        "exclude": args.exclude,
        "optimize": args.optimize,
        "workers": args.workers,
        "output_dir": args.output_dir,
        "filename": args.filename,
        "write_stats": args.write_stats,
    }

    try:
        files = run_once(args.config, overrides=overrides)
    except (ValueError, OSError, yaml.YAMLError):
        # already logged by run_once
        return 1
    for path in files:
        print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
