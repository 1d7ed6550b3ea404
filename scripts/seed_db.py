from __future__ import annotations

import importlib
import logging.config
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.timeclock.timeclock.database.bootstrap import ensure_demo_users
from src.timeclock.timeclock.database.connection import DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.config.dictConfig(settings.LOGGING)
    target = DBConfig.from_dict(settings.DB_CONFIG)

    ensure_demo_users(target)
    print(f"OK: Demo users ready -> {target.user}@{target.host}:{target.port}/{target.database}")


if __name__ == "__main__":
    main()
