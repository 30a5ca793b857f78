from sqlalchemy import create_engine, inspect

from app.db.bootstrap import run_migrations


def test_upgrade_creates_schema(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    run_migrations(url)

    engine = create_engine(url)
    try:
        insp = inspect(engine)
        tables = set(insp.get_table_names())
        assert {"user_types", "users", "workshops", "payments", "qr_codes", "attendances"} <= tables
        user_cols = {c["name"] for c in insp.get_columns("users")}
        assert {"workshop_id", "status_event", "matricula"} <= user_cols
        uniques = {u["name"] for u in insp.get_unique_constraints("qr_codes")}
        assert "uq_qr_code_token_workshop" in uniques
        indexes = {i["name"]: i for i in insp.get_indexes("attendances")}
        assert indexes["uq_attendances_user_scope"]["unique"]
    finally:
        engine.dispose()


def test_seed_is_idempotent(session_factory):
    from sqlalchemy import func, select

    from app.core.config import settings
    from app.db.init_db import TYPE_NAMES, init_db
    from app.models.user import User
    from app.models.user_type import UserType

    with session_factory() as session:
        init_db(session)
        init_db(session)

        assert session.scalar(select(func.count()).select_from(UserType)) == len(TYPE_NAMES)
        admin = session.scalar(select(User).where(User.email == settings.SEED_ADMIN_EMAIL))
        assert admin.type_name == "Admin"
        assert admin.status_event is True
