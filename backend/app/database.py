"""
Configuration de la connexion à la base de données PostgreSQL.
Fournit la session par requête et la frontière transactionnelle des services.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.config import settings
from app.exceptions import ConflictError, InternalError

logger = logging.getLogger(__name__)

# Code SQLSTATE PostgreSQL pour unique_violation
UNIQUE_VIOLATION = "23505"

engine = create_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)

# expire_on_commit=False : les objets retournés par les services restent lisibles
# après le commit sans relancer une requête par ligne.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dépendance FastAPI : fournit une session BDD et la ferme après usage."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def is_unique_violation(exc: IntegrityError) -> bool:
    """Vrai si l'IntegrityError provient d'une contrainte d'unicité (PK composite incluse)."""
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code is not None:
        return code == UNIQUE_VIOLATION
    # SQLite ne fournit pas de SQLSTATE
    return "unique constraint" in str(orig).lower()


@contextmanager
def atomic(db: Session, operation: str, **context) -> Iterator[Session]:
    """
    Exécute un bloc de lectures/écritures dans la transaction de la session.

    - Succès : commit.
    - Erreur métier levée dans le bloc : rollback puis propagation telle quelle.
    - Violation d'unicité : rollback, ConflictError.
    - Toute autre erreur SQLAlchemy : rollback, log ERROR, InternalError
      (le message du driver n'est jamais renvoyé à l'appelant).
    """
    try:
        yield db
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if is_unique_violation(exc):
            logger.warning("%s : violation d'unicité (%s)", operation, context)
            raise ConflictError(
                "Un enregistrement identique existe déjà.",
                details={"operation": operation},
            ) from exc
        logger.error("%s : violation d'intégrité (%s) : %s", operation, context, exc.orig)
        raise InternalError("Une erreur interne est survenue.") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("%s : erreur de persistance (%s) : %s", operation, context, exc)
        raise InternalError("Une erreur interne est survenue.") from exc
    except Exception:
        db.rollback()
        raise
