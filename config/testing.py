import os

from config.config import Config

SECRET_KEY = "test-secret"

DB_CONFIG = {**Config.db_config(), "database": os.getenv("DB_NAME", "timesheet_test_db")}

TOKEN_TTL_DAYS = 7
DEFAULT_PAGE_SIZE = 10
LOG_LEVEL = "WARNING"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

CORS_ORIGINS = ["http://localhost:5173"]
