"""UniFLO: syllabus upload, extraction and storage backend."""

__version__ = "0.1.0"
