from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from tutoring_center.database.bootstrap import DEMO_USERS, ensure_demo_users, init_schema
from tutoring_center.main import create_app


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    app = create_app()
    with app.app_context():
        init_schema(app, db_config=db_config)
        ensure_demo_users()

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )
    for _, email, password, role in DEMO_USERS:
        print(f"  {role.value:<8} {email} / {password}")


if __name__ == "__main__":
    main()
