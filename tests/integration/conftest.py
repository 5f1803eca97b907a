"""
Name: Integration Test DB Setup

Responsibilities:
  - Ensure database schema exists before integration tests run
  - Run Alembic migrations once per test session
  - Truncate tables between tests

Notes:
  - Only runs when RUN_INTEGRATION=1
  - Uses DATABASE_URL from environment (see alembic/env.py)
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from psycopg import connect

from obras.infrastructure.db.pool import close_pool, init_pool, reset_pool

ROOT_DIR = Path(__file__).resolve().parents[2]

DB_USER = os.getenv("POSTGRES_USER", "postgres")
DB_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
DB_HOST = os.getenv("POSTGRES_HOST", "localhost")
DB_PORT = os.getenv("POSTGRES_PORT", "5432")
DB_NAME = os.getenv("POSTGRES_DB", "obras")
DEFAULT_DATABASE_URL = (
    f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

RUN_INTEGRATION = os.getenv("RUN_INTEGRATION") == "1"


def pytest_collection_modifyitems(config, items) -> None:
    if RUN_INTEGRATION:
        return
    skip = pytest.mark.skip(reason="integration tests require RUN_INTEGRATION=1")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(scope="session")
def database_url() -> str:
    return os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL


@pytest.fixture(scope="session")
def migrated_pool(database_url: str):
    """R: Aplica migraciones y abre el pool global una vez por sesión."""
    os.environ["DATABASE_URL"] = database_url
    alembic_cfg = Config(str(ROOT_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(ROOT_DIR / "alembic"))
    command.upgrade(alembic_cfg, "head")

    reset_pool()
    pool = init_pool(database_url, min_size=1, max_size=4)
    yield pool
    close_pool()


@pytest.fixture
def clean_db(database_url: str, migrated_pool):
    with connect(database_url, autocommit=True) as conn:
        conn.execute("TRUNCATE TABLE casos, users, comunas")
    yield migrated_pool
