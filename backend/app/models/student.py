"""
Modèle SQLAlchemy pour la table student.
"""

from sqlalchemy import Column, Date, Integer, String

from app.database import Base
from app.models.mixins import SoftDeleteMixin, TimestampMixin


class Student(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "student"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    birth_date = Column(Date, nullable=False)
