"""
Recherche des élèves, utilisée lors de l'inscription dans une classe.
"""

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from app.models.student import Student


def get_student(db: Session, student_id: int) -> Student:
    """Retourne un élève non supprimé. Lève NotFoundError sinon."""
    student = db.get(Student, student_id)
    if student is None or student.deleted_at is not None:
        raise NotFoundError("Élève", student_id)
    return student
