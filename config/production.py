import os

from config.config import Config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = Config.db_config()

TOKEN_TTL_DAYS = Config.TOKEN_TTL_DAYS
DEFAULT_PAGE_SIZE = Config.DEFAULT_PAGE_SIZE
LOG_LEVEL = Config.LOG_LEVEL

DEBUG = False

AUTO_INIT_DB = Config.AUTO_INIT_DB

CORS_ORIGINS = Config.CORS_ORIGINS
