import os

from config.config import build_database_uri, db_config_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config_from_env()
SQLALCHEMY_DATABASE_URI = build_database_uri(DB_CONFIG)

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
MAX_COINS_PER_AWARD = int(os.getenv("MAX_COINS_PER_AWARD", "100"))

# create_all() on startup is idempotent (existing tables are left alone)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Demo admin/teacher/student accounts
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
