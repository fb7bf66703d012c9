"""User-facing errors with actionable context.

Errors are messages for humans reading a CI log. Each error should answer:
1. What went wrong?
2. What was the context?
3. What can the user do about it?
"""

import dataclasses

import beartype


@beartype.beartype
@dataclasses.dataclass(frozen=True)
class GrrSetupError(Exception):
    """Base error with structured context for user-facing messages."""

    message: str
    """What went wrong."""

    hint: str | None = None
    """What the user can do about it."""

    def __str__(self) -> str:
        parts = [self.message]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        return "\n".join(parts)


@beartype.beartype
@dataclasses.dataclass(frozen=True)
class ResolutionError(GrrSetupError):
    """The release index could not tell us which version to install."""


@beartype.beartype
@dataclasses.dataclass(frozen=True)
class AcquisitionError(GrrSetupError):
    """Downloading or preparing the binary failed."""

    url: str | None = dataclasses.field(default=None, kw_only=True)
    """Download URL involved, if any."""


@beartype.beartype
@dataclasses.dataclass(frozen=True)
class CacheError(GrrSetupError):
    """Storing a binary in the tool cache failed."""


@beartype.beartype
@dataclasses.dataclass(frozen=True)
class PublishError(GrrSetupError):
    """Writing to the runner's PATH or output files failed."""


@beartype.beartype
@dataclasses.dataclass(frozen=True)
class ConfigWriteError(GrrSetupError):
    """A `config set` subprocess failed to start or exited non-zero."""

    key: str = dataclasses.field(kw_only=True)
    """Config key whose subprocess failed."""

    exit_code: int | None = dataclasses.field(default=None, kw_only=True)
    """Exit code of the subprocess, or None if it never started."""

    @staticmethod
    def make(key: str, exit_code: int) -> "ConfigWriteError":
        """Create a ConfigWriteError for a non-zero exit."""
        return ConfigWriteError(
            message=f"Could not set config key {key} (exit code {exit_code})",
            hint="Check the grr output above for the reason.",
            key=key,
            exit_code=exit_code,
        )
