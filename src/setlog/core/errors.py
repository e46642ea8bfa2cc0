"""Error taxonomy shared by the core and the adapters."""


class SetlogError(Exception):
    """Base class for all setlog failures."""

    pass


class DocumentNotFound(SetlogError):
    """Raised when a tasks or exercise document does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Document not found: {path}")
        self.path = path


class DocumentTableMalformed(SetlogError):
    """Raised when no append point can be located in a result table."""

    pass


class LineMismatch(SetlogError):
    """Raised when a task line changed between parse and write."""

    def __init__(self, line_index: int, expected: str):
        super().__init__(
            f"Could not find a matching todo line at line {line_index + 1} (expected {expected!r})"
        )
        self.line_index = line_index
        self.expected = expected


class WriteFailed(SetlogError):
    """Raised when the document store rejects a write."""

    def __init__(self, path: str, reason: str = ""):
        message = f"Failed to write {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path


class DocumentUnreadable(SetlogError):
    """Raised when a document exists but cannot be read or decoded."""

    def __init__(self, path: str, reason: str = ""):
        message = f"Cannot read {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path
