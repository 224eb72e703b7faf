import os
import urllib.parse


def db_config_from_env(default_database: str = "tutoring_center") -> dict:
    """mysql-connector style dict, also used to CREATE DATABASE on first start."""
    return {
        "host": os.environ.get("DB_HOST", "localhost"),
        "port": int(os.environ.get("DB_PORT", "3306")),
        "user": os.environ.get("DB_USER", "root"),
        "password": os.environ.get("DB_PASSWORD", ""),
        "database": os.environ.get("DB_NAME", default_database),
    }


def build_database_uri(db_config: dict) -> str:
    """SQLAlchemy URI for the MySQL connector driver.

    DATABASE_URL wins when set (e.g. ``sqlite:///tutoring.db`` for a quick local run).
    """
    override = os.environ.get("DATABASE_URL")
    if override:
        return override

    # The password may contain '@' or ':'
    encoded_password = urllib.parse.quote_plus(str(db_config.get("password", "")))
    return (
        f"mysql+mysqlconnector://{db_config.get('user')}:{encoded_password}"
        f"@{db_config.get('host')}:{int(db_config.get('port', 3306))}/{db_config.get('database')}"
    )
