"""
Scanner Errors
==============
Exceptions raised at the extraction boundary.

Only text extraction is allowed to abort a scan; page signal failures are
recorded on the page and never raised.
"""


class ScanError(Exception):
    """Base class for scanner errors."""


class ExtractionError(ScanError):
    """The document could not be opened or its text could not be read."""
