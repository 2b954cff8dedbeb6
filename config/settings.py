import os
from dotenv import load_dotenv

# Load environment variables from the project root
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), "..", ".env"))

DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:
    pg_host = os.getenv("PGHOST")
    pg_port = os.getenv("PGPORT", "5432")
    pg_db = os.getenv("PGDATABASE")
    pg_user = os.getenv("PGUSER")
    pg_password = os.getenv("PGPASSWORD")

    if all([pg_host, pg_db, pg_user, pg_password]):
        DATABASE_URL = (
            f"postgresql+asyncpg://{pg_user}:{pg_password}@{pg_host}:{pg_port}/{pg_db}"
        )
    else:
        # The interval accessors work without a database; only the engine needs one.
        DATABASE_URL = None


def _bool_env(name: str, default: str = "1") -> bool:
    value = os.getenv(name, default).strip().lower()
    return value not in {"0", "false", "no"}


SQL_ECHO = _bool_env("SQL_ECHO", "false")

# Column used when a model registers tstzrange accessors without naming one
TSTZRANGE_DEFAULT_FIELD = os.getenv("TSTZRANGE_DEFAULT_FIELD", "period").strip() or "period"
