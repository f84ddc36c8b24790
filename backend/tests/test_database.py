"""
Tests unitaires pour la frontière transactionnelle atomic() et la traduction des erreurs.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app.database import atomic, is_unique_violation
from app.exceptions import ConflictError, InternalError, InvalidOperationError


class FakePgError(Exception):
    """Imite l'erreur psycopg2 qui expose le SQLSTATE dans pgcode."""

    def __init__(self, message, pgcode):
        super().__init__(message)
        self.pgcode = pgcode


def make_integrity_error(orig):
    return IntegrityError("INSERT INTO attendance ...", {}, orig)


# ============================================================
# is_unique_violation
# ============================================================

def test_unique_violation_postgres():
    exc = make_integrity_error(FakePgError("duplicate key", "23505"))
    assert is_unique_violation(exc) is True


def test_foreign_key_violation_postgres():
    exc = make_integrity_error(FakePgError("violates foreign key", "23503"))
    assert is_unique_violation(exc) is False


def test_unique_violation_sqlite():
    exc = make_integrity_error(Exception("UNIQUE constraint failed: attendance.student_id, attendance.lesson_id"))
    assert is_unique_violation(exc) is True


def test_not_null_sqlite():
    exc = make_integrity_error(Exception("NOT NULL constraint failed: attendance.lesson_id"))
    assert is_unique_violation(exc) is False


# ============================================================
# atomic
# ============================================================

def test_atomic_commit_en_cas_de_succes():
    db = MagicMock()
    with atomic(db, "operation_test"):
        db.add("x")
    db.commit.assert_called_once()
    db.rollback.assert_not_called()


def test_atomic_erreur_metier_propagee_avec_rollback():
    db = MagicMock()
    with pytest.raises(InvalidOperationError, match="refusé"):
        with atomic(db, "operation_test"):
            raise InvalidOperationError("refusé")
    db.commit.assert_not_called()
    db.rollback.assert_called_once()


def test_atomic_violation_unicite_devient_conflict():
    db = MagicMock()
    db.commit.side_effect = make_integrity_error(FakePgError("duplicate key", "23505"))
    with pytest.raises(ConflictError):
        with atomic(db, "operation_test", lesson_id=1):
            pass
    db.rollback.assert_called_once()


def test_atomic_autre_violation_devient_internal_error():
    db = MagicMock()
    db.flush.side_effect = make_integrity_error(FakePgError("violates foreign key", "23503"))
    with pytest.raises(InternalError):
        with atomic(db, "operation_test"):
            db.flush()
    db.rollback.assert_called_once()


def test_atomic_erreur_driver_masquee():
    """Le message du driver ne doit jamais remonter à l'appelant."""
    db = MagicMock()
    db.commit.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused on 10.0.0.5"))
    with pytest.raises(InternalError) as exc_info:
        with atomic(db, "operation_test"):
            pass
    assert "10.0.0.5" not in exc_info.value.message
    assert exc_info.value.status_code == 500
    db.rollback.assert_called_once()
