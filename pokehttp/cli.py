from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from pydantic import ValidationError

from pokehttp.config import Settings
from pokehttp.errors import RequestFileError
from pokehttp.http.client import HttpClient
from pokehttp.http.parser import parse_file
from pokehttp.tui.app import PokeApp
from pokehttp.tui.session import Session
from pokehttp.tui.state import SessionState

logger = logging.getLogger("pokehttp")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

EXIT_FAILURE = 1
EXIT_USAGE = 2


def setup_logging(settings: Settings) -> None:
    if settings.log_file is None:
        logger.addHandler(logging.NullHandler())
        return

    handler = logging.FileHandler(settings.log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(settings.log_level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="poke",
        description="Interactive HTTP client for .http files",
    )
    parser.add_argument("file", metavar="FILE", help="Path to the .http file")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds (overrides POKE_TIMEOUT)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
        if args.timeout is not None:
            settings = Settings.model_validate(
                {**settings.model_dump(), "timeout_s": args.timeout}
            )
    except ValidationError as e:
        print(f"error: invalid configuration\n{e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        setup_logging(settings)
    except OSError as e:
        print(f"error: cannot open log file {settings.log_file}: {e}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        request_file = parse_file(args.file)
    except RequestFileError as e:
        logger.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if not request_file.requests:
        print(f"No requests found in {args.file}", file=sys.stderr)
        return EXIT_FAILURE

    logger.info(
        "loaded %d requests from %s", len(request_file.requests), request_file.path
    )

    client = HttpClient(
        timeout_s=settings.timeout_s,
        follow_redirects=settings.follow_redirects,
    )
    state = SessionState(request_file=request_file, page_step=settings.page_step)
    PokeApp(Session(state, client), client).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
