from __future__ import annotations

from pathlib import Path


class BuildError(Exception):
    """Base class for every failure that aborts a build."""


class MissingInputError(BuildError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"missing required file: {path}")
        self.path = path


class PlaceholderNotFoundError(BuildError):
    def __init__(self, placeholder: str) -> None:
        super().__init__(f"Placeholder {placeholder} not found in template")
        self.placeholder = placeholder


class TransformError(BuildError):
    """The downleveling step failed; ``stderr`` holds the transpiler output."""

    def __init__(self, message: str, stderr: str = "") -> None:
        if stderr:
            message = f"{message}\n{stderr.rstrip()}"
        super().__init__(message)
        self.stderr = stderr


class ConfigError(BuildError):
    pass


class FetchError(BuildError):
    pass
