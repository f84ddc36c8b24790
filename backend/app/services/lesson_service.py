"""
Recherche des leçons pour le domaine des présences.
"""

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from app.models.lesson import Lesson


def get_lesson(db: Session, lesson_id: int) -> Lesson:
    """Retourne une leçon non supprimée. Lève NotFoundError sinon."""
    lesson = db.get(Lesson, lesson_id)
    if lesson is None or lesson.deleted_at is not None:
        raise NotFoundError("Leçon", lesson_id)
    return lesson
