"""
Router pour la saisie des présences d'une leçon (appel en classe).
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.attendance import AttendanceResponse, BulkAttendanceRequest
from app.services import attendance_service

router = APIRouter(prefix="/api/v1/lessons", tags=["Présences"])


@router.post(
    "/{lesson_id}/attendances",
    response_model=List[AttendanceResponse],
    status_code=201,
    summary="Enregistrer l'appel d'une leçon",
)
def create_attendances(lesson_id: int, data: BulkAttendanceRequest, db: Session = Depends(get_db)):
    """
    Enregistre les présences de tous les élèves de la classe pour la leçon.

    - Chaque élève de la classe doit figurer dans la saisie (400 sinon, IDs manquants listés)
    - Un élève hors de la classe est refusé (400, IDs listés)
    - En politique stricte, 400 si l'appel a déjà été fait : utiliser PATCH
    - 404 si la leçon est introuvable
    """
    return attendance_service.record_attendances(db, lesson_id, data.attendances)


@router.patch(
    "/{lesson_id}/attendances",
    response_model=List[AttendanceResponse],
    summary="Corriger l'appel d'une leçon",
)
def update_attendances(lesson_id: int, data: BulkAttendanceRequest, db: Session = Depends(get_db)):
    """
    Met à jour les présences des élèves envoyés uniquement.
    Un élève inscrit après l'appel initial reçoit une nouvelle présence.
    """
    return attendance_service.bulk_update(db, lesson_id, data.attendances)


@router.get(
    "/{lesson_id}/attendances",
    response_model=List[AttendanceResponse],
    summary="Lister les présences d'une leçon",
)
def list_attendances(lesson_id: int, db: Session = Depends(get_db)):
    return attendance_service.find_all_by_lesson(db, lesson_id, include_student=True)


@router.delete("/{lesson_id}/attendances", status_code=204, summary="Effacer l'appel d'une leçon")
def remove_attendances(lesson_id: int, db: Session = Depends(get_db)):
    """Supprime (logiquement) toutes les présences de la leçon."""
    attendance_service.remove_all_by_lesson(db, lesson_id)
