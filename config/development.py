import os

from .config import CORS_ORIGIN, TOKEN_EXPIRE_DAYS, db_config_from_env, env_flag, logging_config

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config_from_env(default_password="timeclock")

DEBUG = env_flag("DEBUG", "1")
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOGGING = logging_config(LOG_LEVEL)

SESSION_COOKIE_SECURE = False

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
# Optional: also create the demo accounts on startup
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
