"""Queryable model of the DICOM standard's object and module definitions."""

__version__ = "0.1.0"
