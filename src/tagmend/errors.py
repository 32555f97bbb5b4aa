"""Exception types shared across tagmend."""

from __future__ import annotations


class TagmendError(Exception):
    """Base class for tagmend errors."""


class ConfigurationError(TagmendError, ValueError):
    """Invalid run configuration; nothing should be processed."""


class TransformError(TagmendError, ValueError):
    """A transform step could not interpret its input under its code page."""

    def __init__(self, step: str, message: str, pipeline: str | None = None) -> None:
        super().__init__(message)
        self.step = step
        self.message = message
        self.pipeline = pipeline

    def __str__(self) -> str:
        prefix = f"{self.pipeline}: " if self.pipeline else ""
        return f"{prefix}{self.step} failed: {self.message}"


class ContainerError(TagmendError, RuntimeError):
    """The tag container could not be opened, parsed, or saved."""
