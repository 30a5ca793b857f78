import os
import tempfile

# antes de importar app.*: settings são lidos no import
os.environ.setdefault("DATA_DIR", tempfile.gettempdir())
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PAYMENT_WEBHOOK_SECRET", "whsec_test")
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from app.api.deps import get_db
from app.core.tokens import create_access_token
from app.db.base import Base
from app.db.init_db import TYPE_NAMES
from app.db.session import make_engine
from app.main import api
from app.models.user import User
from app.models.user_type import UserType
from app.models.workshop import Workshop


@pytest.fixture()
def engine(tmp_path):
    # arquivo (e não :memory:) para que várias conexões/threads vejam o mesmo banco
    eng = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    for name in TYPE_NAMES:
        session.add(UserType(name=name))
    session.commit()
    yield session
    session.close()


@pytest.fixture()
def client(db, session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    api.dependency_overrides[get_db] = _get_db
    with TestClient(api) as c:
        yield c
    api.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    counter = {"n": 0}

    def _make(email=None, *, type_name="Estudiante", status_event=False, **kw):
        counter["n"] += 1
        user_type = db.scalar(select(UserType).where(UserType.name == type_name))
        user = User(
            name=kw.pop("name", f"Usuario {counter['n']}"),
            email=email or f"user{counter['n']}@example.com",
            status_event=status_event,
            user_type_id=user_type.id if user_type else None,
            **kw,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture()
def make_workshop(db):
    def _make(name="Oficina", *, spots_max=None, spots_occupied=0, **kw):
        w = Workshop(name=name, spots_max=spots_max, spots_occupied=spots_occupied, **kw)
        db.add(w)
        db.commit()
        db.refresh(w)
        return w

    return _make


@pytest.fixture()
def auth_header():
    def _header(user):
        return {"Authorization": f"Bearer {create_access_token(sub=str(user.id))}"}

    return _header


@pytest.fixture()
def admin(make_user):
    return make_user("admin@example.com", type_name="Admin", status_event=True)
