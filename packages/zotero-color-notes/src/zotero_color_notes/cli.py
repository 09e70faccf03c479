"""
Zotero Color Notes

Summarize highlights of one color into a note on the parent item.

Usage:
    zotero-color-notes ABCD1234                    # Default color (#5fb236)
    zotero-color-notes ABCD1234 --color '#ffd400'  # Yellow highlights
    zotero-color-notes ABCD1234 --group --library-id 12345
    zotero-color-notes --init-config               # Write default config file
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .api import ZoteroAPI
from .config import CONFIG_FILE, ColorNotesConfig, create_default_config
from .summary import create_color_summary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zotero-color-notes",
        description="Summarize annotations of one color into a Zotero note",
    )
    parser.add_argument(
        "item_key",
        nargs="?",
        help="Key of a regular item or of one of its PDF/EPUB/snapshot attachments"
    )
    parser.add_argument(
        "--color", "-c",
        metavar="HEX",
        help="Annotation color to summarize (default: from config, #5fb236)"
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help=f"Config file (default: {CONFIG_FILE})"
    )
    parser.add_argument(
        "--api-key",
        help="Zotero API key (default: config or ZOTERO_API_KEY)"
    )
    parser.add_argument(
        "--library-id",
        help="User or group library ID (default: config or ZOTERO_LIBRARY_ID)"
    )
    parser.add_argument(
        "--group",
        action="store_true",
        help="Treat --library-id as a group library"
    )
    parser.add_argument(
        "--base-url",
        help="API root (default: https://api.zotero.org)"
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Create a default config file and exit"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress progress output"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.init_config:
        path = args.config or CONFIG_FILE
        if path.exists():
            print(f"Config file already exists: {path}")
            return 0
        create_default_config(path)
        print(f"Created config file: {path}")
        print("\nEdit the config file to set your API key and library ID.")
        return 0

    if not args.item_key:
        parser.print_usage(sys.stderr)
        print("Error: an item key is required", file=sys.stderr)
        return 1

    try:
        config = ColorNotesConfig.load(args.config)
    except ValueError as e:
        print(f"Error: invalid config: {e}", file=sys.stderr)
        return 1
    if args.color:
        config.summary.target_color = args.color
    if args.api_key:
        config.api.api_key = args.api_key
    if args.library_id:
        config.api.library_id = args.library_id
    if args.group:
        config.api.library_type = "group"
    if args.base_url:
        config.api.base_url = args.base_url

    if not config.api.api_key:
        print("Error: no Zotero API key configured (use --api-key or ZOTERO_API_KEY)", file=sys.stderr)
        return 1

    def _progress(msg: str) -> None:
        if not args.quiet:
            print(msg)

    api = ZoteroAPI(config.api)
    create_color_summary(api, args.item_key, config, progress_callback=_progress)
    return 0


if __name__ == "__main__":
    sys.exit(main())
