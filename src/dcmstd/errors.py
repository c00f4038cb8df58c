"""Exceptions raised while extracting the standard model."""

from typing import Optional


class DicomStandardError(Exception):
    """Base class for all model extraction errors."""


class RowDecodeError(DicomStandardError):
    """A table row could not be decoded into an entry."""

    def __init__(self, message: str, row_index: Optional[int] = None):
        super().__init__(message)
        self.row_index = row_index


class TableBuildError(DicomStandardError):
    """A table was rejected as a whole."""

    def __init__(self, message: str, table_id: str = "", row_index: Optional[int] = None):
        super().__init__(message)
        self.table_id = table_id
        self.row_index = row_index


class ChapterMissingError(DicomStandardError):
    """A chapter required for the build is absent from the document."""

    def __init__(self, chapter_id: str):
        super().__init__(f"Chapter [{chapter_id}] is missing from the document")
        self.chapter_id = chapter_id


class DocumentLoadError(DicomStandardError):
    """An XML document could not be read or parsed."""

    def __init__(self, source: str, reason: str = ""):
        message = f"Unable to load XML document [{source}]"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.source = source
