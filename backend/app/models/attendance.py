"""
Modèle SQLAlchemy pour les présences par leçon.

Une seule ligne par couple (élève, leçon) : la contrainte UQ_ATTENDANCE_STUDENT_LESSON
couvre aussi les lignes supprimées logiquement, qui sont réactivées plutôt que dupliquées.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.mixins import SoftDeleteMixin, TimestampMixin

NOTES_MAX_LENGTH = 500


class Attendance(TimestampMixin, SoftDeleteMixin, Base):
    """Présence (ou absence) d'un élève à une leçon."""
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("student_id", "lesson_id", name="UQ_ATTENDANCE_STUDENT_LESSON"),
        Index("IDX_ATTENDANCE_STUDENT_ID", "student_id"),
        Index("IDX_ATTENDANCE_LESSON_ID", "lesson_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    lesson_id = Column(Integer, ForeignKey("lesson.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(Integer, ForeignKey("student.id", ondelete="CASCADE"), nullable=False)

    present = Column(Boolean, nullable=False, default=False)
    notes = Column(String(NOTES_MAX_LENGTH), nullable=True)

    # Chargées explicitement (selectinload) par les requêtes qui en ont besoin
    student = relationship("Student")
    lesson = relationship("Lesson")
