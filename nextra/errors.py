"""Exception hierarchy for the scaffolding pipeline.

Pure code (derivation and the script generators) only ever raises
``DerivationError``.  Everything that touches the filesystem or a subprocess
wraps the low-level failure into one of the typed errors below so the
pipeline can report which stage failed.
"""

from __future__ import annotations


class NextraError(Exception):
    """Base class for every error raised by nextra."""


class DerivationError(NextraError):
    """Raised when options cannot be turned into a scaffold configuration.

    This only happens for malformed options (e.g. an unknown package
    manager) and indicates a programming error rather than a runtime one.
    """


class InstallError(NextraError):
    """Raised when a package-manager or tool invocation exits non-zero."""

    def __init__(self, message: str, command: str = "", exit_code: int | None = None, stderr: str = "") -> None:
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(message)


class ManifestIOError(NextraError):
    """Raised when the package manifest is missing, invalid, or unwritable."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class TemplateCopyError(NextraError):
    """Raised when a template asset cannot be copied into the project."""

    def __init__(self, message: str, source: str = "", destination: str = "") -> None:
        self.source = source
        self.destination = destination
        super().__init__(message)


class ReadmeAssemblyError(NextraError):
    """Raised when a markdown fragment cannot be read or the README written."""


class StageError(NextraError):
    """Raised by the pipeline when a stage fails irrecoverably."""

    def __init__(self, stage: str, message: str) -> None:
        self.stage = stage
        super().__init__(f"Stage '{stage}': {message}")
