from pathlib import Path
import duckdb

from ..settings import settings

USERS_DDL = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT UNIQUE NOT NULL,
    role TEXT NOT NULL CHECK (role IN ('ADMIN', 'ARTISAN', 'CLIENT')),
    is_onboarded BOOLEAN NOT NULL DEFAULT FALSE,
    company_name TEXT,
    specialty TEXT,
    address TEXT,
    phone TEXT,
    lat DOUBLE,
    lng DOUBLE,
    documents_status TEXT CHECK (documents_status IN ('compliant', 'missing', 'expired'))
);
"""

def get_duckdb_path() -> str:
    return str(settings.db_path)

def connect(db_path: Path | str | None = None, read_only: bool = False) -> duckdb.DuckDBPyConnection:
    path = Path(db_path) if db_path is not None else Path(get_duckdb_path())
    if not read_only:
        path.parent.mkdir(parents=True, exist_ok=True)
    con = duckdb.connect(str(path), read_only=read_only)
    if not read_only:
        con.execute(USERS_DDL)
    return con
