"""
Command line entry point.

    python -m playersig https://example.com/player/base.js formats.json
    cat formats.json | python -m playersig https://example.com/player/base.js -

Prints {url: format} as JSON on stdout; failed formats go to stderr.
"""
from __future__ import annotations
import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace

from .config import Settings
from .errors import PlayerSigError
from .executor import EXECUTORS
from .runner import Decipherer

log = logging.getLogger("playersig")


def _load_formats(path: str) -> list[dict]:
    if path == "-":
        data = json.load(sys.stdin)
    else:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    if not isinstance(data, list):
        raise ValueError("formats JSON must be an array of objects")
    return data


async def run(player_url: str, formats: list[dict], settings: Settings) -> int:
    async with Decipherer(settings) as decipherer:
        resolved = await decipherer.decipher_formats(formats, player_url)

    json.dump(resolved, sys.stdout, indent=2)
    sys.stdout.write("\n")
    for failure in resolved.failures:
        print(json.dumps(failure.to_dict()), file=sys.stderr)
    return 0 if resolved.ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="playersig",
        description="Resolve format URLs using the player's decipher / n-transform functions")
    parser.add_argument("player_url", help="URL of the player script")
    parser.add_argument("formats", help="JSON file with an array of formats, or - for stdin")
    parser.add_argument("--timeout", type=int, default=None, help="Fetch timeout in seconds")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--executor", choices=EXECUTORS, default=None,
                        help="JS backend for the extracted functions")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"playersig: {e}", file=sys.stderr)
        return 2
    if args.timeout:
        settings = replace(settings, timeout=args.timeout)
    if args.log_level:
        settings = replace(settings, log_level=args.log_level.upper())
    if args.executor:
        settings = replace(settings, executor=args.executor)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        formats = _load_formats(args.formats)
        return asyncio.run(run(args.player_url, formats, settings))
    except (PlayerSigError, ValueError, OSError, ImportError) as e:
        log.error("%s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
