"""
Modèle SQLAlchemy pour les leçons : une séance d'une classe, unité de prise de présence.
"""

from sqlalchemy import Column, Date, ForeignKey, Integer, String

from app.database import Base
from app.models.mixins import SoftDeleteMixin, TimestampMixin


class Lesson(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "lesson"

    id = Column(Integer, primary_key=True, autoincrement=True)
    course_class_id = Column(Integer, ForeignKey("course_class.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    topic = Column(String(255), nullable=True)
