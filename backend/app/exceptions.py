"""
Erreurs métier levées par les services.

Chaque erreur porte le code HTTP et le code applicatif qui seront renvoyés
par le handler enregistré dans app.main. Les services ne dépendent pas de FastAPI.
"""

from typing import Any, Optional


class DomainError(Exception):
    """Base des erreurs métier."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(DomainError):
    """Entité référencée inexistante ou supprimée logiquement."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: Any = None, message: Optional[str] = None):
        details = {}
        if identifier is not None:
            details["identifier"] = identifier
        super().__init__(message or f"{resource} introuvable.", details)
        self.resource = resource


class InvalidOperationError(DomainError):
    """Violation d'une règle métier (couverture, appartenance, doublon)."""

    status_code = 400
    code = "INVALID_OPERATION"


class ConflictError(DomainError):
    """Contrainte d'unicité violée au niveau de la base."""

    status_code = 409
    code = "CONFLICT"


class InternalError(DomainError):
    """Échec de persistance ou erreur inattendue. Le message reste générique."""

    status_code = 500
    code = "INTERNAL_ERROR"
