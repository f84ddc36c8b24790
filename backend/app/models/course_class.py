"""
Modèles SQLAlchemy pour les classes (sessions d'un cours) et leurs effectifs.

Les effectifs élèves et enseignants sont de pures tables de liaison :
la clé primaire composite (classe, personne) interdit les doublons.
"""

from sqlalchemy import Column, Date, ForeignKey, Integer, String

from app.database import Base
from app.models.mixins import SoftDeleteMixin, TimestampMixin

COURSE_CLASS_STATUSES = ("FORMING", "IN_PROGRESS", "COMPLETED", "CANCELLED")


class CourseClass(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "course_class"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    status = Column(String(20), nullable=False, default="FORMING")  # FORMING, IN_PROGRESS, COMPLETED, CANCELLED
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    course_id = Column(Integer, ForeignKey("course.id"), nullable=False, index=True)


class CourseClassStudent(Base):
    """Liaison classe ↔ élèves inscrits."""
    __tablename__ = "course_class_student"

    course_class_id = Column(Integer, ForeignKey("course_class.id", ondelete="CASCADE"), primary_key=True)
    student_id = Column(Integer, ForeignKey("student.id", ondelete="CASCADE"), primary_key=True)


class CourseClassTeacher(Base):
    """Liaison classe ↔ enseignants responsables."""
    __tablename__ = "course_class_teacher"

    course_class_id = Column(Integer, ForeignKey("course_class.id", ondelete="CASCADE"), primary_key=True)
    teacher_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), primary_key=True)
