"""debpack core: errors, logging and configuration."""

from debpack.core.config import ConfigResolver, LoggingPolicy
from debpack.core.errors import (
    ArchiveWriteError,
    ConfigError,
    ContainerWriteError,
    DebpackError,
    InvalidEntryError,
    ManifestError,
    RenderError,
    SourceReadError,
)
from debpack.core.logging import (
    VerbosityLevel,
    apply_logging_policy,
    get_logger,
    get_verbosity,
    set_colors,
    set_verbosity,
)

__all__ = [
    # Config
    "ConfigResolver",
    "LoggingPolicy",
    # Errors
    "DebpackError",
    "ConfigError",
    "ManifestError",
    "InvalidEntryError",
    "SourceReadError",
    "ArchiveWriteError",
    "RenderError",
    "ContainerWriteError",
    # Logging
    "VerbosityLevel",
    "apply_logging_policy",
    "get_logger",
    "get_verbosity",
    "set_colors",
    "set_verbosity",
]
