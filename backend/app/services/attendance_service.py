"""
Service métier pour la prise de présence par leçon.

Saisie en masse :
- bulk_create : première saisie d'une leçon. Tous les élèves de la classe doivent
  figurer dans la saisie ; refusée si des présences existent déjà (utiliser bulk_update).
- bulk_update : mise à jour partielle. Seuls les élèves envoyés sont modifiés ;
  un élève inscrit après la première saisie reçoit une nouvelle ligne.
- bulk_upsert : couverture complète exigée, mais les lignes existantes sont mises à jour
  au lieu de bloquer la saisie (ATTENDANCE_POLICY=upsert).

Chaque saisie lit la leçon, l'effectif et les présences existantes puis écrit,
le tout dans une seule transaction (atomic) : aucune ligne partielle en cas d'échec.

Une ligne supprimée logiquement pour le même couple (élève, leçon) est réactivée
plutôt que dupliquée, la contrainte d'unicité couvrant aussi ces lignes.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from app.config import settings
from app.database import atomic
from app.exceptions import ConflictError, InvalidOperationError, NotFoundError
from app.models.attendance import Attendance
from app.models.lesson import Lesson
from app.models.student import Student
from app.schemas.attendance import AttendanceCreate, AttendanceItem, AttendanceUpdate
from app.services import class_service, lesson_service, student_service

logger = logging.getLogger(__name__)


# --- Saisie en masse ---

def bulk_create(db: Session, lesson_id: int, items: Sequence[AttendanceItem]) -> list[Attendance]:
    """
    Première saisie des présences d'une leçon.

    Étapes :
    1. La leçon doit exister (NotFoundError)
    2. Aucune présence active ne doit exister pour la leçon (InvalidOperationError)
    3. Tous les élèves de la classe doivent être présents dans la saisie
    4. Aucun élève étranger à la classe ne doit y figurer
    5. Écriture de toutes les lignes en un seul flush
    """
    with atomic(db, "bulk_create_attendances", lesson_id=lesson_id):
        lesson = lesson_service.get_lesson(db, lesson_id)

        if _count_active(db, lesson.id) > 0:
            logger.warning("Saisie refusée : présences déjà enregistrées pour la leçon %s", lesson.id)
            raise InvalidOperationError(
                "Des présences existent déjà pour cette leçon. Utilisez la mise à jour.",
                details={"lesson_id": lesson.id},
            )

        roster = _load_roster(db, lesson)
        _validate_submission(roster, items, require_full_coverage=True)
        rows = _merge(db, lesson, items, roster)

    logger.info("Présences créées pour la leçon %s : %d élèves", lesson_id, len(rows))
    return rows


def bulk_update(db: Session, lesson_id: int, items: Sequence[AttendanceItem]) -> list[Attendance]:
    """
    Mise à jour partielle des présences d'une leçon.
    Seule l'appartenance des élèves envoyés à la classe est vérifiée.
    """
    with atomic(db, "bulk_update_attendances", lesson_id=lesson_id):
        lesson = lesson_service.get_lesson(db, lesson_id)
        roster = _load_roster(db, lesson)
        _validate_submission(roster, items, require_full_coverage=False)
        rows = _merge(db, lesson, items, roster)

    logger.info("Présences mises à jour pour la leçon %s : %d élèves", lesson_id, len(rows))
    return rows


def bulk_upsert(db: Session, lesson_id: int, items: Sequence[AttendanceItem]) -> list[Attendance]:
    """Saisie complète qui met à jour les lignes existantes au lieu de refuser la saisie."""
    with atomic(db, "bulk_upsert_attendances", lesson_id=lesson_id):
        lesson = lesson_service.get_lesson(db, lesson_id)
        roster = _load_roster(db, lesson)
        _validate_submission(roster, items, require_full_coverage=True)
        rows = _merge(db, lesson, items, roster)

    logger.info("Présences enregistrées (upsert) pour la leçon %s : %d élèves", lesson_id, len(rows))
    return rows


def record_attendances(
    db: Session,
    lesson_id: int,
    items: Sequence[AttendanceItem],
    policy: Optional[str] = None,
) -> list[Attendance]:
    """Saisie initiale selon la politique configurée (strict par défaut)."""
    policy = policy or settings.ATTENDANCE_POLICY
    if policy == "upsert":
        return bulk_upsert(db, lesson_id, items)
    return bulk_create(db, lesson_id, items)


def find_all_by_lesson(db: Session, lesson_id: int, include_student: bool = True) -> list[Attendance]:
    """Retourne les présences non supprimées d'une leçon."""
    with atomic(db, "find_attendances_by_lesson", lesson_id=lesson_id):
        lesson_service.get_lesson(db, lesson_id)

        query = (
            select(Attendance)
            .where(Attendance.lesson_id == lesson_id, Attendance.deleted_at.is_(None))
            .order_by(Attendance.id)
        )
        if include_student:
            query = query.options(selectinload(Attendance.student))
        rows = db.execute(query).scalars().all()

    return list(rows)


def remove_all_by_lesson(db: Session, lesson_id: int) -> int:
    """
    Supprime logiquement toutes les présences d'une leçon (saisie erronée).
    Retourne le nombre de lignes supprimées.
    """
    with atomic(db, "remove_attendances_by_lesson", lesson_id=lesson_id):
        lesson_service.get_lesson(db, lesson_id)
        result = db.execute(
            update(Attendance)
            .where(Attendance.lesson_id == lesson_id, Attendance.deleted_at.is_(None))
            .values(deleted_at=datetime.now(timezone.utc))
        )

    logger.info("Présences supprimées pour la leçon %s : %s lignes", lesson_id, result.rowcount)
    return result.rowcount


# --- Présence unitaire ---

def create_attendance(db: Session, data: AttendanceCreate) -> Attendance:
    """
    Enregistre la présence d'un seul élève.

    Lève ConflictError si une présence active existe déjà pour le couple (élève, leçon),
    y compris quand une insertion concurrente passe avant celle-ci.
    """
    with atomic(db, "create_attendance", lesson_id=data.lesson_id, student_id=data.student_id):
        lesson = lesson_service.get_lesson(db, data.lesson_id)
        student = student_service.get_student(db, data.student_id)

        if not class_service.is_student_in_class(db, lesson.course_class_id, student.id):
            raise InvalidOperationError(
                f"L'élève {student.id} ne fait pas partie de la classe de cette leçon.",
                details={"student_ids": [student.id]},
            )

        row = db.execute(
            select(Attendance).where(
                Attendance.lesson_id == lesson.id,
                Attendance.student_id == student.id,
            )
        ).scalar_one_or_none()

        if row is not None and row.deleted_at is None:
            raise ConflictError(
                "Une présence existe déjà pour cet élève et cette leçon.",
                details={"lesson_id": lesson.id, "student_id": student.id},
            )
        if row is None:
            row = Attendance(lesson_id=lesson.id, student_id=student.id, student=student)
            db.add(row)

        row.present = data.present
        row.notes = data.notes
        row.deleted_at = None
        db.flush()

    logger.info("Présence créée : élève %s, leçon %s", data.student_id, data.lesson_id)
    return row


def get_attendance(db: Session, attendance_id: int) -> Attendance:
    with atomic(db, "get_attendance", attendance_id=attendance_id):
        row = _get_active(db, attendance_id)
    return row


def update_attendance(db: Session, attendance_id: int, data: AttendanceUpdate) -> Attendance:
    """Met à jour les champs fournis d'une présence."""
    with atomic(db, "update_attendance", attendance_id=attendance_id):
        row = _get_active(db, attendance_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(row, field, value)
        db.flush()
    return row


def remove_attendance(db: Session, attendance_id: int) -> None:
    """Supprime logiquement une présence."""
    with atomic(db, "remove_attendance", attendance_id=attendance_id):
        row = _get_active(db, attendance_id)
        row.deleted_at = datetime.now(timezone.utc)

    logger.info("Présence %s supprimée", attendance_id)


# --- Helpers ---

def _count_active(db: Session, lesson_id: int) -> int:
    return db.execute(
        select(func.count())
        .select_from(Attendance)
        .where(Attendance.lesson_id == lesson_id, Attendance.deleted_at.is_(None))
    ).scalar() or 0


def _load_roster(db: Session, lesson: Lesson) -> dict[int, Student]:
    """Effectif de la classe de la leçon, indexé par ID d'élève (ordre de l'effectif conservé)."""
    students = class_service.get_students_from_class(db, lesson.course_class_id)
    return {student.id: student for student in students}


def _validate_submission(
    roster: dict[int, Student],
    items: Sequence[AttendanceItem],
    require_full_coverage: bool,
) -> None:
    """
    Compare les élèves envoyés à l'effectif (ensembles, O(n+m)).
    Lève InvalidOperationError avec la liste des IDs fautifs.
    """
    submitted_ids = [item.student_id for item in items]

    seen: set[int] = set()
    duplicates = []
    for sid in submitted_ids:
        if sid in seen and sid not in duplicates:
            duplicates.append(sid)
        seen.add(sid)
    if duplicates:
        raise InvalidOperationError(
            f"Élèves présents plusieurs fois dans la saisie : {_join(duplicates)}",
            details={"student_ids": duplicates},
        )

    if require_full_coverage:
        missing_ids = [sid for sid in roster if sid not in seen]
        if missing_ids:
            logger.warning("Saisie incomplète, élèves manquants : %s", missing_ids)
            raise InvalidOperationError(
                f"Présences manquantes pour les élèves : {_join(missing_ids)}",
                details={"student_ids": missing_ids},
            )

    invalid_ids = [sid for sid in submitted_ids if sid not in roster]
    if invalid_ids:
        logger.warning("Saisie refusée, élèves hors de la classe : %s", invalid_ids)
        raise InvalidOperationError(
            f"Les élèves {_join(invalid_ids)} ne font pas partie de cette classe.",
            details={"student_ids": invalid_ids},
        )


def _merge(
    db: Session,
    lesson: Lesson,
    items: Sequence[AttendanceItem],
    roster: dict[int, Student],
) -> list[Attendance]:
    """
    Fusionne la saisie avec les lignes existantes de la leçon :
    mise à jour sur place si la ligne existe (même supprimée logiquement), création sinon.
    """
    submitted_ids = [item.student_id for item in items]

    # Une seule requête pour les lignes existantes, indexées par élève
    existing = db.execute(
        select(Attendance)
        .options(selectinload(Attendance.student))
        .where(
            Attendance.lesson_id == lesson.id,
            Attendance.student_id.in_(submitted_ids),
        )
    ).scalars().all()
    existing_by_student = {row.student_id: row for row in existing}

    rows: list[Attendance] = []
    new_rows: list[Attendance] = []
    for item in items:
        row = existing_by_student.get(item.student_id)
        if row is None:
            row = Attendance(
                lesson_id=lesson.id,
                student_id=item.student_id,
                student=roster[item.student_id],
            )
            new_rows.append(row)
        row.present = item.present
        row.notes = item.notes
        row.deleted_at = None
        rows.append(row)

    db.add_all(new_rows)
    # Un seul flush : les INSERT sont envoyés en batch
    db.flush()
    return rows


def _get_active(db: Session, attendance_id: int) -> Attendance:
    row = db.execute(
        select(Attendance)
        .options(selectinload(Attendance.student))
        .where(Attendance.id == attendance_id, Attendance.deleted_at.is_(None))
    ).scalar_one_or_none()
    if row is None:
        raise NotFoundError("Présence", attendance_id)
    return row


def _join(ids: Sequence[int]) -> str:
    return ", ".join(str(i) for i in ids)
