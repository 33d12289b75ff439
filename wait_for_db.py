import os, time
from urllib.parse import urlparse

from app.core.config import settings

DATABASE_URL = settings.DATABASE_URL


def wait_for_postgres(database_url: str) -> None:
    import psycopg2

    # SQLAlchemy URL may start with postgresql+psycopg2://
    url = database_url.replace("postgresql+psycopg2://", "postgresql://")
    p = urlparse(url)

    host = p.hostname or "db"
    port = p.port or 5432
    user = p.username or "sapiens"
    password = p.password or "sapiens"
    dbname = (p.path or "/sapiens_care").lstrip("/") or "sapiens_care"

    timeout_s = int(os.getenv("DB_WAIT_TIMEOUT", "60"))
    start = time.time()

    print(f"[wait_for_db] Waiting for Postgres at {host}:{port} db={dbname} user={user} (timeout={timeout_s}s)")
    while True:
        try:
            conn = psycopg2.connect(host=host, port=port, user=user, password=password, dbname=dbname)
            conn.close()
            print("[wait_for_db] Postgres is ready.")
            break
        except psycopg2.OperationalError as e:
            if time.time() - start > timeout_s:
                print(f"[wait_for_db] Timed out waiting for DB. Last error: {e}")
                raise
            time.sleep(1)


if DATABASE_URL.startswith("postgresql"):
    wait_for_postgres(DATABASE_URL)
