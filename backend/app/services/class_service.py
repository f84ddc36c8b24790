"""
Service métier pour les effectifs des classes : inscription des élèves
et assignation des enseignants.

Règles :
- un élève (ou un enseignant) ne figure qu'une seule fois dans une classe ;
- un retrait doit viser un membre actuel de la classe.
Les liaisons n'ont pas d'identité propre : seule leur existence compte.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.database import atomic
from app.exceptions import ConflictError, InvalidOperationError, NotFoundError
from app.models.course_class import CourseClass, CourseClassStudent, CourseClassTeacher
from app.models.student import Student
from app.models.user import User
from app.schemas.course_class import RosterPage
from app.schemas.student import StudentResponse
from app.services import student_service, user_service

logger = logging.getLogger(__name__)


def get_course_class(db: Session, class_id: int) -> CourseClass:
    """Retourne une classe non supprimée. Lève NotFoundError sinon."""
    course_class = db.get(CourseClass, class_id)
    if course_class is None or course_class.deleted_at is not None:
        raise NotFoundError("Classe", class_id)
    return course_class


# --- Lecture des effectifs ---

def get_students_from_class(db: Session, class_id: int) -> list[Student]:
    """
    Retourne l'effectif complet (non paginé) de la classe, trié par nom.
    Utilisé par la saisie des présences pour vérifier la couverture.
    """
    get_course_class(db, class_id)
    students = db.execute(
        _roster_query(class_id).order_by(Student.name, Student.id)
    ).scalars().all()
    return list(students)


def is_student_in_class(db: Session, class_id: int, student_id: int) -> bool:
    return db.get(CourseClassStudent, (class_id, student_id)) is not None


def get_students_page(db: Session, class_id: int, take: int, page: int) -> RosterPage:
    """Variante paginée de l'effectif, pour l'affichage."""
    get_course_class(db, class_id)

    total = db.execute(
        select(func.count())
        .select_from(CourseClassStudent)
        .join(Student, Student.id == CourseClassStudent.student_id)
        .where(
            CourseClassStudent.course_class_id == class_id,
            Student.deleted_at.is_(None),
        )
    ).scalar() or 0

    students = db.execute(
        _roster_query(class_id)
        .order_by(Student.name, Student.id)
        .offset((page - 1) * take)
        .limit(take)
    ).scalars().all()

    return RosterPage(
        items=[StudentResponse.model_validate(s) for s in students],
        total=total,
        take=take,
        page=page,
    )


def get_teachers_from_class(db: Session, class_id: int) -> list[User]:
    """Retourne les enseignants assignés à la classe, triés par nom."""
    get_course_class(db, class_id)
    teachers = db.execute(
        select(User)
        .join(CourseClassTeacher, CourseClassTeacher.teacher_id == User.id)
        .where(CourseClassTeacher.course_class_id == class_id)
        .order_by(User.name, User.id)
    ).scalars().all()
    return list(teachers)


# --- Gestion des élèves ---

def add_student_to_class(db: Session, class_id: int, student_id: int) -> list[Student]:
    """
    Inscrit un élève dans une classe et retourne l'effectif mis à jour.

    Lève NotFoundError si la classe ou l'élève n'existe pas,
    InvalidOperationError si l'élève est déjà inscrit.
    """
    try:
        with atomic(db, "add_student_to_class", class_id=class_id, student_id=student_id):
            get_course_class(db, class_id)
            student_service.get_student(db, student_id)

            if db.get(CourseClassStudent, (class_id, student_id)) is not None:
                raise _student_already_member(student_id)

            db.add(CourseClassStudent(course_class_id=class_id, student_id=student_id))
    except ConflictError as exc:
        # Deux inscriptions concurrentes : la clé primaire composite a refusé la seconde
        raise _student_already_member(student_id) from exc

    logger.info("Élève %s inscrit dans la classe %s", student_id, class_id)
    return get_students_from_class(db, class_id)


def remove_student_from_class(db: Session, class_id: int, student_id: int) -> list[Student]:
    """
    Retire un élève d'une classe et retourne l'effectif mis à jour.
    Lève NotFoundError si la classe n'existe pas ou si l'élève n'y est pas inscrit.
    """
    with atomic(db, "remove_student_from_class", class_id=class_id, student_id=student_id):
        get_course_class(db, class_id)

        link = db.get(CourseClassStudent, (class_id, student_id))
        if link is None:
            raise NotFoundError(
                "Élève",
                student_id,
                message=f"L'élève {student_id} ne fait pas partie de cette classe.",
            )
        db.delete(link)

    logger.info("Élève %s retiré de la classe %s", student_id, class_id)
    return get_students_from_class(db, class_id)


# --- Gestion des enseignants ---

def add_teacher_to_class(db: Session, class_id: int, teacher_id: int) -> list[User]:
    """
    Assigne un enseignant à une classe et retourne la liste mise à jour.

    Lève NotFoundError si la classe ou l'enseignant n'existe pas,
    InvalidOperationError si l'enseignant est déjà assigné.
    """
    try:
        with atomic(db, "add_teacher_to_class", class_id=class_id, teacher_id=teacher_id):
            get_course_class(db, class_id)
            user_service.get_teacher(db, teacher_id)

            if db.get(CourseClassTeacher, (class_id, teacher_id)) is not None:
                raise _teacher_already_member(teacher_id)

            db.add(CourseClassTeacher(course_class_id=class_id, teacher_id=teacher_id))
    except ConflictError as exc:
        raise _teacher_already_member(teacher_id) from exc

    logger.info("Enseignant %s assigné à la classe %s", teacher_id, class_id)
    return get_teachers_from_class(db, class_id)


def remove_teacher_from_class(db: Session, class_id: int, teacher_id: int) -> list[User]:
    """Retire un enseignant d'une classe. Lève NotFoundError s'il n'y est pas assigné."""
    with atomic(db, "remove_teacher_from_class", class_id=class_id, teacher_id=teacher_id):
        get_course_class(db, class_id)

        link = db.get(CourseClassTeacher, (class_id, teacher_id))
        if link is None:
            raise NotFoundError(
                "Enseignant",
                teacher_id,
                message=f"L'enseignant {teacher_id} n'est pas assigné à cette classe.",
            )
        db.delete(link)

    logger.info("Enseignant %s retiré de la classe %s", teacher_id, class_id)
    return get_teachers_from_class(db, class_id)


def _roster_query(class_id: int):
    """Élèves non supprimés inscrits dans la classe."""
    return (
        select(Student)
        .join(CourseClassStudent, CourseClassStudent.student_id == Student.id)
        .where(
            CourseClassStudent.course_class_id == class_id,
            Student.deleted_at.is_(None),
        )
    )


def _student_already_member(student_id: int) -> InvalidOperationError:
    return InvalidOperationError(
        f"L'élève {student_id} fait déjà partie de cette classe.",
        details={"student_ids": [student_id]},
    )


def _teacher_already_member(teacher_id: int) -> InvalidOperationError:
    return InvalidOperationError(
        f"L'enseignant {teacher_id} est déjà assigné à cette classe.",
        details={"teacher_ids": [teacher_id]},
    )
