# app/db/bootstrap.py
import logging
import os
from typing import Optional

from alembic import command
from alembic.config import Config

from app.db.session import SessionLocal
from app.db.init_db import init_db

logger = logging.getLogger(__name__)

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))

def alembic_config(database_url: Optional[str] = None) -> Config:
    # Aponta explicitamente para alembic.ini e migrations/ (independe do cwd)
    cfg = Config(os.path.join(BASE_DIR, "alembic.ini"))
    cfg.set_main_option("script_location", os.path.join(BASE_DIR, "migrations"))
    if database_url:
        cfg.set_main_option("sqlalchemy.url", database_url)
    return cfg

def run_migrations(database_url: Optional[str] = None, revision: str = "head") -> None:
    command.upgrade(alembic_config(database_url), revision)
    logger.info("migrations applied up to %s", revision)

def run_migrations_and_seed() -> None:
    run_migrations()
    with SessionLocal() as db:
        init_db(db)

if __name__ == "__main__":
    # python -m app.db.bootstrap  (deploy: migra e cria tipos/admin)
    from app.core.logging import setup_logging
    setup_logging()
    run_migrations_and_seed()
