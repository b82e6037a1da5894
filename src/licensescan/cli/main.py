# main.py
# SPDX-License-Identifier: MIT

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from ..core.config import LicenseScanConfig, load_config_from_path
from ..core.detect import Detector
from ..core.log import configure_logging
from ..core.matcher import TextMatcher
from ..core.redistributable import is_module_redistributable
from ..core.types import License
from ..sources.archive import LicenseScanError, open_archive

EXIT_SCAN_ERROR = 2


def _build_parser() -> argparse.ArgumentParser:
    """Build the licensescan argument parser with ``scan`` and ``classify`` subcommands."""
    parser = argparse.ArgumentParser(prog="licensescan", description="Detect and classify license files.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (e.g., DEBUG, INFO, WARNING).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_p = subparsers.add_parser("scan", help="Scan a zip archive or directory for license files.")
    scan_p.add_argument("path", help="Zip file or directory to scan.")
    scan_p.add_argument("--prefix", help="Path prefix to strip, e.g. 'rsc.io/quote@v1.4.1'.")
    scan_p.add_argument("-c", "--config", help="Path to config file (TOML or JSON).")
    scan_p.add_argument("--workers", type=int, help="Override scan.max_workers.")
    scan_p.add_argument("--json", action="store_true", help="Print results as JSON.")

    cls_p = subparsers.add_parser("classify", help="Classify a single text file.")
    cls_p.add_argument("file", help="File whose content is classified.")
    cls_p.add_argument("-c", "--config", help="Path to config file (TOML or JSON).")
    cls_p.add_argument("--json", action="store_true", help="Print the coverage as JSON.")

    return parser


def _load_config(path: Optional[str]) -> LicenseScanConfig:
    """Load a config file when given; its [logging] section replaces --log-level."""
    if not path:
        return LicenseScanConfig()
    cfg = load_config_from_path(path)
    cfg.logging.apply()
    return cfg


def _format_license(lic: License) -> str:
    meta = lic.metadata
    types = ", ".join(meta.types) if meta.types else "UNKNOWN"
    return f"{meta.file_path}\t{types}\t{meta.coverage.percent:.1f}%"


def _cmd_scan(args: argparse.Namespace) -> int:
    cfg = _load_config(args.config)
    if args.prefix is not None:
        cfg.scan.path_prefix = args.prefix
    if args.workers is not None:
        cfg.scan.max_workers = int(args.workers)
    cfg.validate()

    detector = Detector(TextMatcher(config=cfg.matcher), cfg.scan)
    archive = open_archive(args.path)
    try:
        found = detector.detect(None, archive)
    finally:
        close = getattr(archive, "close", None)
        if close is not None:
            close()
    found.sort(key=lambda lic: lic.file_path)

    if args.json:
        payload = {
            "licenses": [lic.to_dict() for lic in found],
            "redistributable": is_module_redistributable(found),
        }
        print(json.dumps(payload, indent=2))
    else:
        for lic in found:
            print(_format_license(lic))
        if not found:
            print("No license files found.", file=sys.stderr)
    return 0


def _cmd_classify(args: argparse.Namespace) -> int:
    cfg = _load_config(args.config)
    data = Path(args.file).read_bytes()
    coverage = TextMatcher(config=cfg.matcher).classify(data)
    if args.json:
        print(json.dumps(coverage.to_dict(), indent=2))
        return 0
    print(f"coverage\t{coverage.percent:.1f}%")
    for match in coverage.matches:
        print(f"{match.name}\t{match.type.value}\t{match.percent:.1f}%\t[{match.start}:{match.end}]")
    return 0


def _dispatch(args: argparse.Namespace) -> int:
    """Run the selected subcommand and return its exit code."""
    configure_logging(level=args.log_level)
    if args.command == "scan":
        return _cmd_scan(args)
    if args.command == "classify":
        return _cmd_classify(args)
    print(f"Unknown command: {args.command}", file=sys.stderr)
    return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the ``licensescan`` console script.

    Returns:
        int: 0 on success, 2 when the scan itself failed (unreadable
        archive or entry), 1 for any other error.
    """
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    try:
        return _dispatch(args)
    except LicenseScanError as exc:
        print(f"Scan failed: {exc}", file=sys.stderr)
        return EXIT_SCAN_ERROR
    except Exception as exc:  # noqa: BLE001
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
