"""docsmith: template variable extraction, conditional rules and profile auto-fill."""

__version__ = "0.1.0"
