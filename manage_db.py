#!/usr/bin/env python3
"""
Database management for crudhub.

    python manage_db.py migrate          upgrade to the latest revision
    python manage_db.py rollback [n]     downgrade n revisions (default 1)
    python manage_db.py current          show the applied revision
    python manage_db.py history          list every revision
    python manage_db.py create <msg>     autogenerate a revision from the models
    python manage_db.py stamp <rev>      record a revision without running it
    python manage_db.py reset            downgrade to base and upgrade again

The database URL comes from the DATABASE_URL setting.
"""

import sys
from pathlib import Path
from typing import Callable, Dict, List

from alembic import command
from alembic.config import Config

from crudhub.config import get_settings


MIGRATIONS_DIR = Path(__file__).resolve().parent / "crudhub" / "infrastructure" / "db" / "migrations"


def alembic_config() -> Config:
    return Config(str(MIGRATIONS_DIR / "alembic.ini"))


def migrate(args: List[str]) -> None:
    command.upgrade(alembic_config(), "head")


def rollback(args: List[str]) -> None:
    steps = int(args[0]) if args else 1
    if steps < 1:
        raise SystemExit("rollback needs a positive number of revisions")
    print(f"Downgrading {steps} revision(s)")
    command.downgrade(alembic_config(), f"-{steps}")


def current(args: List[str]) -> None:
    command.current(alembic_config(), verbose=True)


def history(args: List[str]) -> None:
    command.history(alembic_config())


def create(args: List[str]) -> None:
    if not args:
        raise SystemExit("create needs a revision message")
    command.revision(alembic_config(), message=" ".join(args), autogenerate=True)


def stamp(args: List[str]) -> None:
    if len(args) != 1:
        raise SystemExit("stamp needs exactly one revision")
    command.stamp(alembic_config(), args[0])


def reset(args: List[str]) -> None:
    if get_settings().is_production:
        raise SystemExit("reset is disabled in production")
    if input("Every table will be dropped. Type 'yes' to continue: ").strip().lower() != "yes":
        print("Nothing changed")
        return
    config = alembic_config()
    command.downgrade(config, "base")
    command.upgrade(config, "head")


COMMANDS: Dict[str, Callable[[List[str]], None]] = {
    "migrate": migrate,
    "rollback": rollback,
    "current": current,
    "history": history,
    "create": create,
    "stamp": stamp,
    "reset": reset,
}


def main(argv: List[str]) -> int:
    if not argv or argv[0] not in COMMANDS:
        print(__doc__)
        return 1 if argv else 0

    COMMANDS[argv[0]](argv[1:])
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
