"""Seed or reset administrator accounts.

Usage:
    python scripts/seed_admin.py                      # seed from ADMIN_SEED_PATH
    python scripts/seed_admin.py --file admins.json   # seed from a given file
    python scripts/seed_admin.py --email a@b.c --password secret
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app  # noqa: E402
from models import db  # noqa: E402
from services import AccountService  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--file", dest="seed_file")
    parser.add_argument("--email")
    parser.add_argument("--password")
    args = parser.parse_args(argv)

    if bool(args.email) != bool(args.password):
        parser.error("--email and --password must be given together")

    app = create_app()
    with app.app_context():
        db.create_all()
        accounts = AccountService(db.session)
        if args.email:
            admin, created = accounts.seed_admin(args.email, args.password)
            action = "created" if created else "updated"
            print(f"Admin user {action}: {admin.email}")
        else:
            path = args.seed_file or app.config["ADMIN_SEED_PATH"]
            count = accounts.seed_admins_from_file(path)
            print(f"Admins seeded/updated: {count}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
