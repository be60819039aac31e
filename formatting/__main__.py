"""
Render markdown from a file or stdin for a messaging channel.

Run with: python -m formatting --channel telegram message.md
"""

import argparse
import json
import sys
from typing import List, Optional

from loguru import logger

from config.logging_config import configure_logging
from config.settings import get_settings

from .dispatcher import render
from .models import RenderedMessage


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m formatting",
        description="Render markdown for a messaging channel.",
    )
    parser.add_argument(
        "--channel",
        default="plaintext",
        help="telegram, discord, whatsapp (or strict, passthrough, relaxed); "
        "anything else renders plain text",
    )
    parser.add_argument(
        "--payload",
        action="store_true",
        help="print the JSON delivery payload instead of the bare text",
    )
    parser.add_argument(
        "file", nargs="?", default=None, help="markdown file (default: stdin)"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_file, settings.log_level)
    logger.enable("formatting")

    if args.file:
        with open(args.file, encoding="utf-8") as fh:
            message = fh.read()
    else:
        message = sys.stdin.read()
    result = render(message, args.channel)

    if args.payload:
        if isinstance(result, RenderedMessage):
            payload = result.to_payload()
        else:
            payload = {"text": result}
        print(json.dumps(payload, ensure_ascii=False))
    else:
        print(str(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
