"""Domain layer definitions."""

from .wizard import (
    ATP_STEPS,
    BAST_STEPS,
    BastForm,
    PhotoAsset,
    ProjectInfo,
    VoltageMeasurement,
    WizardSession,
    WizardStep,
)

__all__ = [
    "ATP_STEPS",
    "BAST_STEPS",
    "BastForm",
    "PhotoAsset",
    "ProjectInfo",
    "VoltageMeasurement",
    "WizardSession",
    "WizardStep",
]
