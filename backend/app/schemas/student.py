"""
Schémas Pydantic pour les élèves.
"""

from datetime import date

from pydantic import BaseModel


class StudentResponse(BaseModel):
    """Schéma de réponse pour un élève."""
    id: int
    name: str
    birth_date: date

    model_config = {"from_attributes": True}
