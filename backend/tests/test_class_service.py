"""
Tests unitaires pour le service des effectifs de classes (inscription / retrait).
"""

from datetime import date, datetime
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from app.exceptions import InvalidOperationError, NotFoundError
from app.models.course_class import CourseClass, CourseClassStudent, CourseClassTeacher
from app.models.student import Student
from app.models.user import User
from app.schemas.course_class import StudentAdd, TeacherAdd
from app.services.class_service import (
    add_student_to_class,
    add_teacher_to_class,
    get_course_class,
    get_students_from_class,
    get_students_page,
    remove_student_from_class,
    remove_teacher_from_class,
)


# --- Helpers ---

def make_class_mock(class_id=1, deleted_at=None):
    c = MagicMock(spec=CourseClass)
    c.id = class_id
    c.name = "Programmation 2"
    c.deleted_at = deleted_at
    return c


def make_student_mock(student_id=10, deleted_at=None):
    s = MagicMock(spec=Student)
    s.id = student_id
    s.deleted_at = deleted_at
    return s


def make_db(course_class=None, student=None, student_link=None, teacher=None, teacher_link=None, roster=None):
    """Mock de session : db.get répond selon le modèle demandé."""
    db = MagicMock()
    lookup = {
        CourseClass: course_class,
        Student: student,
        CourseClassStudent: student_link,
        User: teacher,
        CourseClassTeacher: teacher_link,
    }
    db.get.side_effect = lambda model, key: lookup.get(model)
    db.execute.return_value.scalars.return_value.all.return_value = roster or []
    return db


class FakePgError(Exception):
    pgcode = "23505"


# --- Validation des schémas ---

def test_student_add_id_negatif_rejete():
    with pytest.raises(ValidationError):
        StudentAdd(student_id=0)


def test_teacher_add_id_valide():
    assert TeacherAdd(teacher_id=3).teacher_id == 3


# ============================================================
# get_course_class / get_students_from_class
# ============================================================

def test_get_course_class_inexistante():
    db = make_db(course_class=None)
    with pytest.raises(NotFoundError, match="Classe introuvable"):
        get_course_class(db, 1)


def test_get_course_class_supprimee():
    db = make_db(course_class=make_class_mock(deleted_at=datetime(2026, 1, 1)))
    with pytest.raises(NotFoundError):
        get_course_class(db, 1)


def test_get_students_from_class_retourne_effectif_complet():
    roster = [make_student_mock(10), make_student_mock(11)]
    db = make_db(course_class=make_class_mock(), roster=roster)

    result = get_students_from_class(db, 1)

    assert [s.id for s in result] == [10, 11]


def test_get_students_from_class_classe_inexistante():
    db = make_db(course_class=None)
    with pytest.raises(NotFoundError):
        get_students_from_class(db, 99)
    db.execute.assert_not_called()


def test_get_students_page():
    students = [
        Student(id=10, name="Alice", birth_date=date(2010, 3, 1)),
        Student(id=11, name="Bruno", birth_date=date(2010, 5, 12)),
    ]
    db = make_db(course_class=make_class_mock(), roster=students)
    db.execute.return_value.scalar.return_value = 12

    page = get_students_page(db, 1, take=2, page=3)

    assert page.total == 12
    assert page.take == 2
    assert page.page == 3
    assert [s.name for s in page.items] == ["Alice", "Bruno"]


# ============================================================
# add_student_to_class
# ============================================================

def test_add_student_succes():
    student = make_student_mock(10)
    db = make_db(course_class=make_class_mock(), student=student, roster=[student])

    result = add_student_to_class(db, 1, 10)

    link = db.add.call_args[0][0]
    assert isinstance(link, CourseClassStudent)
    assert link.course_class_id == 1
    assert link.student_id == 10
    db.commit.assert_called_once()
    assert result == [student]


def test_add_student_deja_inscrit():
    """Un second ajout du même élève est refusé et ne modifie rien."""
    db = make_db(course_class=make_class_mock(), student=make_student_mock(10), student_link=MagicMock())

    with pytest.raises(InvalidOperationError, match="fait déjà partie") as exc_info:
        add_student_to_class(db, 1, 10)

    assert exc_info.value.details["student_ids"] == [10]
    db.add.assert_not_called()
    db.commit.assert_not_called()
    db.rollback.assert_called_once()


def test_add_student_classe_inexistante():
    db = make_db(course_class=None, student=make_student_mock(10))
    with pytest.raises(NotFoundError, match="Classe"):
        add_student_to_class(db, 1, 10)
    db.add.assert_not_called()


def test_add_student_eleve_inexistant():
    db = make_db(course_class=make_class_mock(), student=None)
    with pytest.raises(NotFoundError, match="Élève"):
        add_student_to_class(db, 1, 10)
    db.add.assert_not_called()


def test_add_student_eleve_supprime():
    db = make_db(course_class=make_class_mock(), student=make_student_mock(10, deleted_at=datetime(2026, 1, 1)))
    with pytest.raises(NotFoundError):
        add_student_to_class(db, 1, 10)


def test_add_student_inscription_concurrente():
    """La clé primaire composite refuse le doublon : l'élève est considéré déjà inscrit."""
    db = make_db(course_class=make_class_mock(), student=make_student_mock(10))
    db.commit.side_effect = IntegrityError("INSERT", {}, FakePgError("duplicate key"))

    with pytest.raises(InvalidOperationError, match="fait déjà partie"):
        add_student_to_class(db, 1, 10)
    db.rollback.assert_called_once()


# ============================================================
# remove_student_from_class
# ============================================================

def test_remove_student_succes():
    link = MagicMock()
    db = make_db(course_class=make_class_mock(), student_link=link)

    remove_student_from_class(db, 1, 10)

    db.delete.assert_called_once_with(link)
    db.commit.assert_called_once()


def test_remove_student_non_inscrit():
    """Retirer un élève absent de l'effectif → NotFoundError, rien n'est supprimé."""
    db = make_db(course_class=make_class_mock(), student_link=None)

    with pytest.raises(NotFoundError, match="ne fait pas partie"):
        remove_student_from_class(db, 1, 10)

    db.delete.assert_not_called()
    db.commit.assert_not_called()


def test_remove_student_classe_inexistante():
    db = make_db(course_class=None, student_link=MagicMock())
    with pytest.raises(NotFoundError):
        remove_student_from_class(db, 1, 10)
    db.delete.assert_not_called()


# ============================================================
# Enseignants
# ============================================================

def test_add_teacher_succes():
    teacher = MagicMock(spec=User)
    teacher.id = 7
    db = make_db(course_class=make_class_mock(), teacher=teacher, roster=[teacher])

    result = add_teacher_to_class(db, 1, 7)

    link = db.add.call_args[0][0]
    assert isinstance(link, CourseClassTeacher)
    assert link.teacher_id == 7
    assert result == [teacher]


def test_add_teacher_deja_assigne():
    db = make_db(course_class=make_class_mock(), teacher=MagicMock(spec=User), teacher_link=MagicMock())
    with pytest.raises(InvalidOperationError, match="déjà assigné") as exc_info:
        add_teacher_to_class(db, 1, 7)
    assert exc_info.value.details["teacher_ids"] == [7]
    db.add.assert_not_called()


def test_add_teacher_inexistant():
    db = make_db(course_class=make_class_mock(), teacher=None)
    with pytest.raises(NotFoundError, match="Enseignant"):
        add_teacher_to_class(db, 1, 7)


def test_remove_teacher_non_assigne():
    db = make_db(course_class=make_class_mock(), teacher_link=None)
    with pytest.raises(NotFoundError, match="n'est pas assigné"):
        remove_teacher_from_class(db, 1, 7)
    db.delete.assert_not_called()


def test_remove_teacher_succes():
    link = MagicMock()
    db = make_db(course_class=make_class_mock(), teacher_link=link)
    remove_teacher_from_class(db, 1, 7)
    db.delete.assert_called_once_with(link)
    db.commit.assert_called_once()
