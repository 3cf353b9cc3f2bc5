"""
Domain exceptions for quick order entry.

Unresolvable text, malformed quantities and drafts referencing retired parts
are not errors; they leave a line incomplete. These exceptions cover actions
that must not proceed at all.
"""


class QuickOrderError(Exception):
    """Base exception for quick order errors"""
    pass


class EmptySubmissionError(QuickOrderError):
    """Raised when an order is submitted without any valid lines"""

    def __init__(self, message: str = "Add at least one part with a quantity before sending the order"):
        super().__init__(message)


class ImportColumnError(QuickOrderError):
    """Raised when bulk import runs without a usable identifier column"""
    pass


class LineIndexError(QuickOrderError, IndexError):
    """Raised when a row command targets a row that does not exist"""
    pass


class CatalogCacheError(QuickOrderError):
    """Raised when the offline catalog cache cannot be read or written"""
    pass
