"""
Modèle SQLAlchemy pour les cours (catalogue).
Seule la lecture est utilisée par le domaine : une classe appartient à un cours.
"""

from sqlalchemy import Column, Integer, String

from app.database import Base
from app.models.mixins import SoftDeleteMixin, TimestampMixin


class Course(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "course"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
