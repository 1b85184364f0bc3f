"""Errors that propagate to docsmith callers.

Malformed rules, conditions and targets never raise; only invalid
top-level inputs do.
"""


class DocsmithError(Exception):
    """Base exception for docsmith."""


class InvalidInputError(DocsmithError, ValueError):
    """Raised when a top-level input is missing or unusable."""
