from __future__ import annotations

import argparse
import importlib

from dotenv import load_dotenv

from vacation_tracker.config import get_settings_module
from vacation_tracker.database.bootstrap import apply_schema, ensure_admin_user, list_tables


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the vacation tables and the first administrator.")
    parser.add_argument("--skip-admin", action="store_true", help="only apply schema.sql")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    if not args.skip_admin and getattr(settings, "ADMIN_PASSWORD", ""):
        ensure_admin_user(
            db_config,
            username=settings.ADMIN_USERNAME,
            password=settings.ADMIN_PASSWORD,
            full_name=getattr(settings, "ADMIN_NAME", "Admin"),
        )

    tables = list_tables(db_config)
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)})"
    )


if __name__ == "__main__":
    main()
