"""
Schémas Pydantic pour les enseignants (utilisateurs assignés aux classes).
"""

from pydantic import BaseModel, EmailStr


class TeacherResponse(BaseModel):
    """Le hash du mot de passe n'est jamais exposé."""
    id: int
    name: str
    email: EmailStr
    role: str

    model_config = {"from_attributes": True}
