import os

from .config import CORS_ORIGIN, TOKEN_EXPIRE_DAYS, db_config_from_env, logging_config

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env(default_password="timeclock", default_database="timeclock_test")

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
LOGGING = logging_config(LOG_LEVEL)

SESSION_COOKIE_SECURE = False

AUTO_INIT_DB = False
AUTO_SEED_DB = False
