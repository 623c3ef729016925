"""Application services."""

from .wizard import (
    SessionNotFound,
    WizardService,
    build_wizard_service,
    configure_wizard_service,
    get_wizard_service,
    reset_wizard_state,
)

__all__ = [
    "SessionNotFound",
    "WizardService",
    "build_wizard_service",
    "configure_wizard_service",
    "get_wizard_service",
    "reset_wizard_state",
]
