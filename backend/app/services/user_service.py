"""
Recherche des enseignants (utilisateurs), utilisée lors de l'assignation à une classe.
"""

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from app.models.user import User


def get_teacher(db: Session, teacher_id: int) -> User:
    """Retourne l'utilisateur à assigner. Lève NotFoundError s'il n'existe pas."""
    user = db.get(User, teacher_id)
    if user is None:
        raise NotFoundError("Enseignant", teacher_id)
    return user
