"""MyNotes: local notes and contacts store."""

__version__ = "0.1.0"
