"""Validation and sanity checks for derived views."""

from .sanity_checks import ValidationWarning, ViewSanityChecker, validate_stream_views

__all__ = [
    "ValidationWarning",
    "ViewSanityChecker",
    "validate_stream_views"
]
