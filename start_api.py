#!/usr/bin/env python3
"""
Wait for the DB, run migrations (same DATABASE_URL as the app), then uvicorn.
"""
import os
import sys

# 1) Wait for DB (Postgres only; SQLite needs no wait)
import wait_for_db  # noqa: F401

# 2) Run migrations using the same settings as the app
from app.core.config import settings
from alembic.config import Config
from alembic import command

alembic_cfg = Config(os.path.join(os.path.dirname(os.path.abspath(__file__)), "alembic.ini"))
alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
command.upgrade(alembic_cfg, "head")

# 3) Start uvicorn (replace current process)
os.execv(
    sys.executable,
    [sys.executable, "-m", "uvicorn", "app.main:app", "--host", "0.0.0.0", "--port", str(settings.PORT)],
)
