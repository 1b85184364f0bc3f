"""Document instance strategies."""

from docsmith.strategies.documents.personalizer import DocumentPersonalizer

__all__ = ["DocumentPersonalizer"]
