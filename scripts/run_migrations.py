#!/usr/bin/env python3
"""Apply account store migrations with Logfire error tracking."""

import sys
import logfire
from alembic import command
from alembic.config import Config

from tglogin.config import Settings
from tglogin.util.observability import configure_logfire


def main() -> int:
    """Upgrade the account store to the latest revision."""
    settings = Settings()
    configure_logfire(settings)

    with logfire.span("run_migrations", environment=settings.environment):
        try:
            command.upgrade(Config("alembic.ini"), "head")
        except Exception as e:
            logfire.error(
                "Account store migration failed",
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # Re-raise so the service does not start on a broken schema
            raise

        logfire.info("Account store migrated")
        return 0


if __name__ == "__main__":
    sys.exit(main())
