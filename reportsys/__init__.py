"""Team daily reports: local store, summarizer and CLI."""

__version__ = "0.1.0"
