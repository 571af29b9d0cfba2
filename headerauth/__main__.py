"""
headerauth entry point: extract an API key from an Authorization header value.

Usage:
    python -m headerauth "ApiKey <key>"
    echo "ApiKey <key>" | python -m headerauth

Exit codes:
    0  key extracted and printed
    1  malformed Authorization header
    2  invalid command-line arguments (argparse)
    3  no Authorization header value supplied
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from headerauth.auth import AUTH_HEADER, NO_AUTH_HEADER, get_api_key, mask_key
from headerauth.config import load_config

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_MALFORMED = 1
EXIT_NO_HEADER = 3


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="headerauth",
        description="Extract the API key from an 'ApiKey <key>' Authorization header value",
    )
    parser.add_argument(
        "value",
        nargs="?",
        help="Authorization header value; read from stdin when omitted",
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML config file")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    config = load_config(args.config)

    logging.basicConfig(
        level=getattr(logging, str(config["logging"]["level"]).upper(), logging.INFO),
        format=config["logging"]["format"],
        stream=sys.stderr,
    )

    if args.value is not None:
        raw = args.value
    else:
        raw = sys.stdin.readline().rstrip("\r\n")

    key, err = get_api_key({AUTH_HEADER: [raw]})
    if err is NO_AUTH_HEADER:
        print(err, file=sys.stderr)
        return EXIT_NO_HEADER
    if err is not None:
        print(err, file=sys.stderr)
        return EXIT_MALFORMED

    if config["output"]["mask_key"]:
        key = mask_key(key)
    print(key)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
