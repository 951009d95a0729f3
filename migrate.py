"""Database migrations (Alembic)

Usage:
    python migrate.py upgrade            # apply pending migrations
    python migrate.py downgrade          # roll back the last migration
    python migrate.py create "message"   # autogenerate a new migration
    python migrate.py current            # show the current revision
    python migrate.py history            # show revision history
"""

import sys
from pathlib import Path

from alembic import command
from alembic.config import Config

from config import ApplicationConfig

ROOT_DIR = Path(__file__).parent


def get_alembic_config() -> Config:
    alembic_cfg = Config(str(ROOT_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("sqlalchemy.url", ApplicationConfig.MIGRATION_DB_URI)
    return alembic_cfg


def main(argv) -> int:
    if len(argv) < 2:
        print(__doc__)
        return 1

    alembic_cfg = get_alembic_config()
    action = argv[1]

    if action == "upgrade":
        command.upgrade(alembic_cfg, "head")
    elif action == "downgrade":
        command.downgrade(alembic_cfg, "-1")
    elif action == "create":
        if len(argv) < 3:
            print("A message is required: python migrate.py create 'message'")
            return 1
        command.revision(alembic_cfg, autogenerate=True, message=argv[2])
    elif action == "current":
        command.current(alembic_cfg)
    elif action == "history":
        command.history(alembic_cfg)
    else:
        print(f"Unknown action: {action}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
