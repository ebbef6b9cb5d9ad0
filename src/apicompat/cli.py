from __future__ import annotations

import argparse
import importlib.metadata
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="apicompat")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version", help="Print apicompat version.")

    p_check = sub.add_parser(
        "check",
        help="Report incompatible changes between an old and a new type graph.",
    )
    p_check.add_argument("old", help="Old API graph (.json, .msgpack or .mpk).")
    p_check.add_argument("new", help="New API graph (.json, .msgpack or .mpk).")
    p_check.add_argument(
        "--methods",
        default=None,
        help="Comma separated method names to compare (default: APICOMPAT_METHODS or marshal methods).",
    )
    p_check.add_argument(
        "--all-methods",
        action="store_true",
        help="Compare every method instead of pruning to --methods.",
    )
    p_check.add_argument(
        "--no-ignore-marshalers",
        action="store_true",
        help="Also compare the structure of types that declare any of the --methods.",
    )

    p_conv = sub.add_parser("convert", help="Re-encode a graph between JSON and MessagePack.")
    p_conv.add_argument("src", help="Input graph file.")
    p_conv.add_argument("dst", help="Output graph file; format follows the extension.")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "version":
        try:
            print(importlib.metadata.version("apicompat"))
        except importlib.metadata.PackageNotFoundError:
            # Source checkout without installed metadata.
            print("0.0.0")
        return

    from .errors import GraphError

    if args.cmd == "check":
        from .codec import read_info
        from .compat import prune_methods
        from .config import default_method_names, parse_method_names
        from .policy import has_any_method, keep_methods, never_ignore
        from .report import compare_graphs

        names = parse_method_names(args.methods) if args.methods is not None else default_method_names()
        try:
            info0 = read_info(Path(args.old))
            info1 = read_info(Path(args.new))
        except GraphError as e:
            raise SystemExit(f"apicompat: {e}") from None

        if not args.all_methods:
            keep = keep_methods(names)
            prune_methods(info0, keep)
            prune_methods(info1, keep)
        ignore = never_ignore if args.no_ignore_marshalers else has_any_method(names)

        try:
            report = compare_graphs(info0, info1, ignore=ignore)
        except GraphError as e:
            raise SystemExit(f"apicompat: {e}") from None
        for line in report.lines():
            print(line)
        if not report.ok:
            logger.info(
                "%d type(s) removed, %d type(s) incompatible",
                len(report.removed),
                len(report.incompatible),
            )
            raise SystemExit(1)
        return

    if args.cmd == "convert":
        from .codec import read_info, write_info

        try:
            info = read_info(Path(args.src))
            write_info(info, Path(args.dst))
        except GraphError as e:
            raise SystemExit(f"apicompat: {e}") from None
        print(str(args.dst))
        return
