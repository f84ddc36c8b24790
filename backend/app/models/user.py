"""
Modèle SQLAlchemy pour les utilisateurs.
Les enseignants sont des utilisateurs assignés à des classes ; l'authentification est gérée ailleurs.
"""

from sqlalchemy import Column, Integer, String

from app.database import Base
from app.models.mixins import TimestampMixin


class User(TimestampMixin, Base):
    __tablename__ = "user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default="TEACHER")  # TEACHER, ADMIN
