#!/usr/bin/env python3
"""Apply or roll back database migrations, reporting failures to Logfire.

Usage:
    python scripts/run_migrations.py                  # upgrade to head
    python scripts/run_migrations.py --revision 3c1f  # upgrade to a revision
    python scripts/run_migrations.py --downgrade base # roll everything back
"""

import argparse
import sys

import logfire
from alembic import command
from alembic.config import Config

from pavilion.config import Settings
from pavilion.util.logging import setup_logging
from pavilion.util.observability import configure_logfire


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run Gallery Pavilion migrations")
    target = parser.add_mutually_exclusive_group()
    target.add_argument("--revision", default="head", help="Upgrade target")
    target.add_argument("--downgrade", metavar="REVISION", help="Downgrade target")
    parser.add_argument("--config", default="alembic.ini", help="Alembic config file")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run migrations against DATABASE__URL."""
    args = parse_args(sys.argv[1:] if argv is None else argv)
    settings = Settings()

    setup_logging(settings)
    configure_logfire(settings)

    alembic_cfg = Config(args.config)
    direction = "downgrade" if args.downgrade else "upgrade"
    revision = args.downgrade or args.revision

    with logfire.span("migrations.run", direction=direction, revision=revision):
        try:
            if args.downgrade:
                command.downgrade(alembic_cfg, args.downgrade)
            else:
                command.upgrade(alembic_cfg, args.revision)
        except Exception as e:
            logfire.error(
                "Database migration failed",
                direction=direction,
                revision=revision,
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # Re-raise so the deploy fails instead of serving a broken schema
            raise

    logfire.info("Database migrations completed", direction=direction, revision=revision)
    return 0


if __name__ == "__main__":
    sys.exit(main())
