"""
Colonnes communes aux tables métier : horodatage et suppression logique.
"""

from sqlalchemy import Column, DateTime, func


class TimestampMixin:
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class SoftDeleteMixin:
    """
    Suppression logique : deleted_at non NULL = ligne supprimée.
    Toutes les lectures du domaine filtrent sur deleted_at IS NULL.
    """
    deleted_at = Column(DateTime, nullable=True)
