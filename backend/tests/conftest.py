"""
Configuration partagée pour tous les tests.

- client : override la dépendance get_db pour éviter toute connexion réelle à PostgreSQL.
- db_session : session SQLAlchemy sur une base SQLite en mémoire, pour les scénarios
  qui enchaînent plusieurs opérations (saisie, correction, effacement).
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session
from unittest.mock import MagicMock

import app.models  # noqa: F401
from app.database import Base, get_db
from app.main import app


@pytest.fixture
def client():
    """Client HTTP de test avec la BDD mockée."""
    mock_db = MagicMock()
    app.dependency_overrides[get_db] = lambda: mock_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """Session sur SQLite en mémoire, schéma créé depuis Base.metadata."""
    engine = create_engine("sqlite://")

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(engine)
    session = Session(engine, autoflush=False, expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
