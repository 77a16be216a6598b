from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

from bpmn_inline.assemble import build
from bpmn_inline.compose import build_html
from bpmn_inline.config import BuildConfig, load_config
from bpmn_inline.errors import BuildError
from bpmn_inline.fetch import DEFAULT_BPMN_VERSION, DEFAULT_JQUERY_VERSION, fetch_vendor
from bpmn_inline.transpile import Downleveler, EsbuildDownleveler, NullDownleveler


def make_downleveler(config: BuildConfig, args: argparse.Namespace) -> Downleveler:
    if args.no_transpile:
        return NullDownleveler()
    return EsbuildDownleveler(config.targets, config.transpiler)


async def run(args: argparse.Namespace) -> List[Path]:
    root = Path(args.root).resolve()
    config_path = root / args.config if args.config else None
    config = load_config(config_path, root)

    if args.command == "html":
        return [await build_html(config)]
    if args.command == "all-in-one":
        if args.targets:
            config = replace(config, targets=tuple(t.strip() for t in args.targets.split(",") if t.strip()))
        return await build(config, make_downleveler(config, args))
    if args.command == "fetch-vendor":
        return await fetch_vendor(
            config,
            bpmn_version=args.bpmn_version,
            jquery_version=args.jquery_version,
            concurrency=args.concurrency,
            timeout=args.timeout,
        )
    raise ValueError(f"unknown command: {args.command}")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="bpmn-inline",
        description="Inline the bpmn-js example bundle and vendor assets into standalone HTML.",
    )
    parser.add_argument(
        "--root",
        default=".",
        help="Project root all configured paths are relative to (default: %(default)s)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="TOML file overriding the default layout, relative to --root (a pyproject.toml uses [tool.bpmn-inline])",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not print the written paths",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("html", help="Inline the app bundle into the template")

    all_in_one = commands.add_parser(
        "all-in-one",
        help="Build the self-contained page and script with vendor assets inlined",
    )
    all_in_one.add_argument(
        "--no-transpile",
        action="store_true",
        help="Skip downleveling the combined script",
    )
    all_in_one.add_argument(
        "--targets",
        default=None,
        help="Comma separated esbuild targets (default: from config)",
    )

    fetch = commands.add_parser("fetch-vendor", help="Download the vendor files into the project")
    fetch.add_argument(
        "--bpmn-version",
        default=DEFAULT_BPMN_VERSION,
        help="bpmn-js release to fetch (default: %(default)s)",
    )
    fetch.add_argument(
        "--jquery-version",
        default=DEFAULT_JQUERY_VERSION,
        help="jQuery release to fetch (default: %(default)s)",
    )
    fetch.add_argument(
        "--concurrency",
        type=int,
        default=4,
        help="Number of parallel downloads (default: %(default)s)",
    )
    fetch.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Per-request timeout in seconds (default: %(default)s)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    try:
        written = asyncio.run(run(args))
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr, flush=True)
        return 130
    except (BuildError, ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    if not args.quiet:
        for path in written:
            print(f"Wrote {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
