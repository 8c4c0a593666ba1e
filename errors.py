"""
Errors for POMO Editor

Every failure raised by the catalog engine derives from CatalogError.
"""


class CatalogError(Exception):
    """Base class for catalog errors"""


class POSyntaxError(CatalogError):
    """Malformed PO text"""

    def __init__(self, message, lineno=None):
        self.message = message
        self.lineno = lineno
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)


class DuplicateEntryError(CatalogError):
    """Two entries share the same (source_text, context) identity"""

    def __init__(self, identity, lineno=None):
        self.identity = identity
        self.lineno = lineno
        source_text, context = identity
        message = f"duplicate entry {source_text!r}"
        if context is not None:
            message += f" (context {context!r})"
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)


class ValidationError(CatalogError):
    """An edit violates the entry's constraints"""


class InvalidStateError(CatalogError):
    """Operation not allowed in the entry's (or session's) current state"""


class EncodingError(CatalogError):
    """Text cannot be represented in the catalog's declared charset"""
