from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.hr_records.hr_records.container import build_store
from src.hr_records.hr_records.database.bootstrap import apply_schema, ensure_admin, list_tables


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the documents table and, optionally, an administrator.")
    parser.add_argument("--admin-mobile", default="")
    parser.add_argument("--admin-password", default="")
    parser.add_argument("--admin-name", default="Administrator")
    parser.add_argument("--admin-email", default="")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    tables = list_tables(db_config)
    print(
        "OK: Applied schema -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)})"
    )

    if args.admin_mobile and args.admin_password:
        store = build_store(backend="mysql", db_config=db_config)
        admin_id = ensure_admin(
            store,
            name=args.admin_name,
            mobile=args.admin_mobile,
            password=args.admin_password,
            email=args.admin_email,
        )
        print(f"OK: Administrator ready (id={admin_id})")


if __name__ == "__main__":
    main()
