import os

from .config import CORS_ORIGIN, TOKEN_EXPIRE_DAYS, db_config_from_env, env_flag, logging_config

SECRET_KEY = os.getenv("SECRET_KEY", "")

DB_CONFIG = db_config_from_env()

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOGGING = logging_config(LOG_LEVEL)

SESSION_COOKIE_SECURE = True

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
