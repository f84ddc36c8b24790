"""
Schémas Pydantic pour la gestion des effectifs d'une classe.
"""

from typing import List

from pydantic import BaseModel, field_validator

from app.schemas.student import StudentResponse


class StudentAdd(BaseModel):
    """Corps de requête pour inscrire un élève dans une classe."""
    student_id: int

    @field_validator("student_id")
    @classmethod
    def positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("L'identifiant de l'élève doit être un entier positif.")
        return v


class TeacherAdd(BaseModel):
    """Corps de requête pour assigner un enseignant à une classe."""
    teacher_id: int

    @field_validator("teacher_id")
    @classmethod
    def positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("L'identifiant de l'enseignant doit être un entier positif.")
        return v


class RosterPage(BaseModel):
    """Page d'élèves d'une classe (affichage uniquement)."""
    items: List[StudentResponse]
    total: int
    take: int
    page: int
