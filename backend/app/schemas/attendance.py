"""
Schémas Pydantic pour les présences par leçon.
Endpoints : /api/v1/lessons/{lesson_id}/attendances et /api/v1/attendances
"""

from typing import List, Optional

from pydantic import BaseModel, field_validator

from app.models.attendance import NOTES_MAX_LENGTH
from app.schemas.student import StudentResponse

MAX_BATCH_SIZE = 500


def _check_notes(v: Optional[str]) -> Optional[str]:
    if v is not None and len(v) > NOTES_MAX_LENGTH:
        raise ValueError(f"Les notes ne peuvent pas dépasser {NOTES_MAX_LENGTH} caractères.")
    return v


class AttendanceItem(BaseModel):
    """Présence d'un élève dans une saisie en masse."""
    student_id: int
    present: bool
    notes: Optional[str] = None

    @field_validator("student_id")
    @classmethod
    def positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("L'identifiant de l'élève doit être un entier positif.")
        return v

    @field_validator("notes")
    @classmethod
    def notes_length(cls, v: Optional[str]) -> Optional[str]:
        return _check_notes(v)


class BulkAttendanceRequest(BaseModel):
    """Corps de la saisie en masse des présences d'une leçon."""
    attendances: List[AttendanceItem]

    @field_validator("attendances")
    @classmethod
    def valid_batch(cls, v: List[AttendanceItem]) -> List[AttendanceItem]:
        if not v:
            raise ValueError("La liste des présences ne peut pas être vide.")
        if len(v) > MAX_BATCH_SIZE:
            raise ValueError(f"Batch trop grand : maximum {MAX_BATCH_SIZE} présences par requête.")
        seen = set()
        for item in v:
            if item.student_id in seen:
                raise ValueError(f"L'élève {item.student_id} apparaît plusieurs fois.")
            seen.add(item.student_id)
        return v


class AttendanceCreate(BaseModel):
    """Création unitaire d'une présence (hors saisie en masse)."""
    lesson_id: int
    student_id: int
    present: bool = False
    notes: Optional[str] = None

    @field_validator("lesson_id", "student_id")
    @classmethod
    def positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("L'identifiant doit être un entier positif.")
        return v

    @field_validator("notes")
    @classmethod
    def notes_length(cls, v: Optional[str]) -> Optional[str]:
        return _check_notes(v)


class AttendanceUpdate(BaseModel):
    """Mise à jour partielle d'une présence : seuls les champs fournis sont modifiés."""
    present: Optional[bool] = None
    notes: Optional[str] = None

    @field_validator("present")
    @classmethod
    def present_not_null(cls, v: Optional[bool]) -> bool:
        # Appelé seulement si le champ est fourni : absent = inchangé, null = refusé
        if v is None:
            raise ValueError("Le champ present ne peut pas être null.")
        return v

    @field_validator("notes")
    @classmethod
    def notes_length(cls, v: Optional[str]) -> Optional[str]:
        return _check_notes(v)


class AttendanceResponse(BaseModel):
    id: int
    lesson_id: int
    student_id: int
    present: bool
    notes: Optional[str] = None
    student: Optional[StudentResponse] = None

    model_config = {"from_attributes": True}
