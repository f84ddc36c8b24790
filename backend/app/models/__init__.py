# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles.

from app.models.course import Course  # noqa: F401
from app.models.user import User  # noqa: F401
from app.models.student import Student  # noqa: F401
from app.models.course_class import CourseClass, CourseClassStudent, CourseClassTeacher  # noqa: F401
from app.models.lesson import Lesson  # noqa: F401
from app.models.attendance import Attendance  # noqa: F401
