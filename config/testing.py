SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "tutoring_center_test",
}
# In-memory SQLite, one connection shared by the whole app
SQLALCHEMY_DATABASE_URI = "sqlite://"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
SESSION_DAYS = 1

AUTO_INIT_DB = True
AUTO_SEED_DB = False
