import os

from config.config import Config

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = Config.db_config()

TOKEN_TTL_DAYS = Config.TOKEN_TTL_DAYS
DEFAULT_PAGE_SIZE = Config.DEFAULT_PAGE_SIZE
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

CORS_ORIGINS = Config.CORS_ORIGINS
