"""
Router pour les présences unitaires (consultation, correction, suppression d'une ligne).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.attendance import AttendanceCreate, AttendanceResponse, AttendanceUpdate
from app.services import attendance_service

router = APIRouter(prefix="/api/v1/attendances", tags=["Présences"])


@router.post("", response_model=AttendanceResponse, status_code=201, summary="Créer une présence")
def create_attendance(data: AttendanceCreate, db: Session = Depends(get_db)):
    """409 si une présence existe déjà pour cet élève et cette leçon."""
    return attendance_service.create_attendance(db, data)


@router.get("/{attendance_id}", response_model=AttendanceResponse, summary="Détail d'une présence")
def get_attendance(attendance_id: int, db: Session = Depends(get_db)):
    return attendance_service.get_attendance(db, attendance_id)


@router.patch("/{attendance_id}", response_model=AttendanceResponse, summary="Modifier une présence")
def update_attendance(attendance_id: int, data: AttendanceUpdate, db: Session = Depends(get_db)):
    """Met à jour les champs fournis. Les champs absents ne sont pas modifiés."""
    return attendance_service.update_attendance(db, attendance_id, data)


@router.delete("/{attendance_id}", status_code=204, summary="Supprimer une présence")
def remove_attendance(attendance_id: int, db: Session = Depends(get_db)):
    attendance_service.remove_attendance(db, attendance_id)
