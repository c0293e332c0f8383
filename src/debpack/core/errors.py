"""Error handling with friendly messages."""

from __future__ import annotations


class DebpackError(Exception):
    """Base exception for all debpack errors."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}\nSuggestion: {self.suggestion}"
        return self.message


class ConfigError(DebpackError):
    """Configuration error."""

    pass


class ManifestError(DebpackError):
    """Package manifest is missing or structurally invalid."""

    pass


class InvalidEntryError(DebpackError):
    """File entry destination does not follow the './' convention."""

    def __init__(self, dst: str) -> None:
        self.dst = dst
        super().__init__(
            f"Destination '{dst}' must start with './'",
            "Write install paths relative to the package root, e.g. './usr/bin/tool'",
        )


class SourceReadError(DebpackError):
    """Source file is missing or unreadable."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        message = f"Cannot read source file '{path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, "Check that the file exists and is readable")


class ArchiveWriteError(DebpackError):
    """Failure writing a header or body into a tar member."""

    def __init__(self, member: str, name: str, reason: str = "") -> None:
        self.member = member
        self.name = name
        message = f"Cannot write '{name}' to {member}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class RenderError(DebpackError):
    """Metadata field would produce a malformed control record."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        super().__init__(f"Cannot render control field '{field}': {reason}")


class ContainerWriteError(DebpackError):
    """Failure writing the outer ar container."""

    def __init__(self, member: str, reason: str = "") -> None:
        self.member = member
        message = f"Cannot write ar member '{member}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
