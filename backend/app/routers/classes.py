"""
Router pour les effectifs des classes : élèves inscrits et enseignants assignés.
Les erreurs métier (NotFoundError, InvalidOperationError) sont traduites par app.main.
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.schemas.course_class import RosterPage, StudentAdd, TeacherAdd
from app.schemas.student import StudentResponse
from app.schemas.user import TeacherResponse
from app.services import class_service

router = APIRouter(prefix="/api/v1/course-classes", tags=["Classes"])


# --- Gestion des élèves ---

@router.get("/{class_id}/students", response_model=RosterPage, summary="Lister les élèves d'une classe")
def list_students(
    class_id: int,
    take: int = Query(settings.ROSTER_PAGE_SIZE, ge=1, le=settings.ROSTER_PAGE_SIZE_MAX),
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
):
    """Retourne une page de l'effectif de la classe, triée par nom."""
    return class_service.get_students_page(db, class_id, take, page)


@router.post(
    "/{class_id}/students",
    response_model=List[StudentResponse],
    status_code=201,
    summary="Inscrire un élève",
)
def add_student(class_id: int, data: StudentAdd, db: Session = Depends(get_db)):
    """
    Inscrit un élève dans la classe et retourne l'effectif mis à jour.
    404 si la classe ou l'élève est introuvable, 400 si l'élève est déjà inscrit.
    """
    return class_service.add_student_to_class(db, class_id, data.student_id)


@router.delete("/{class_id}/students/{student_id}", status_code=204, summary="Retirer un élève")
def remove_student(class_id: int, student_id: int, db: Session = Depends(get_db)):
    """Retire un élève de la classe. 404 s'il n'y est pas inscrit."""
    class_service.remove_student_from_class(db, class_id, student_id)


# --- Gestion des enseignants ---

@router.get("/{class_id}/teachers", response_model=List[TeacherResponse], summary="Lister les enseignants")
def list_teachers(class_id: int, db: Session = Depends(get_db)):
    return class_service.get_teachers_from_class(db, class_id)


@router.post(
    "/{class_id}/teachers",
    response_model=List[TeacherResponse],
    status_code=201,
    summary="Assigner un enseignant",
)
def add_teacher(class_id: int, data: TeacherAdd, db: Session = Depends(get_db)):
    """Assigne un enseignant à la classe. 400 s'il y est déjà assigné."""
    return class_service.add_teacher_to_class(db, class_id, data.teacher_id)


@router.delete("/{class_id}/teachers/{teacher_id}", status_code=204, summary="Retirer un enseignant")
def remove_teacher(class_id: int, teacher_id: int, db: Session = Depends(get_db)):
    """Retire un enseignant de la classe. 404 s'il n'y est pas assigné."""
    class_service.remove_teacher_from_class(db, class_id, teacher_id)
