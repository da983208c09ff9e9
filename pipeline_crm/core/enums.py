"""Enums for the pipeline CRM application."""

from enum import Enum


class UserRole(Enum):
    """Account roles. Only ``admin`` unlocks user management."""

    USER = "user"
    ADMIN = "admin"


class ProspectStatus(Enum):
    """
    Well-known prospect statuses used by the UI.

    Status is stored as free text; these values are defaults and hints,
    never a validation vocabulary.
    """

    PROSPECTION = "Prospection"
    QUALIFICATION = "Qualification"
    PROPOSAL = "Proposition"
    NEGOTIATION = "Negotiation"
    WON = "Gagné"
    LOST = "Perdu"


PDF_MIME_TYPE = "application/pdf"

DEFAULT_PROSPECT_STATUS = ProspectStatus.PROSPECTION.value
DEFAULT_CHANCE_PERCENT = 20
