from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from reposync.app import import_repository
from reposync.config import ConfigurationError, configure_logging, get_import_config, parse_sources
from reposync.domain.import_pipeline import RepositoryImportError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from reposync.config import ImportConfig

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Import repository files from every configured source"
    )
    parser.add_argument(
        "--sources",
        type=str,
        help="Comma separated sources to activate (defaults to REPOSYNC_SOURCES, else all)",
    )
    parser.add_argument(
        "--require-resolved-donors",
        action="store_true",
        default=None,
        help="Withhold files without any resolved donor from release",
    )
    return parser.parse_args(list(argv))


def _build_import_config(args: argparse.Namespace) -> ImportConfig:
    config = get_import_config()
    if args.sources is not None:
        names = [name for name in args.sources.split(",") if name.strip()]
        if not names:
            raise ValueError("--sources requires at least one source name")
        config = replace(config, sources=parse_sources(names))
    if args.require_resolved_donors is not None:
        config = replace(config, require_resolved_donors=args.require_resolved_donors)
    return config


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        import_config = _build_import_config(parsed_args)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        import_repository(import_config=import_config)
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except RepositoryImportError as exc:
        log.error("Repository import failed: %s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during import")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
