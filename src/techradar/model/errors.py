"""
Error Types
===========
Every failure raised by the radar core derives from ``RadarError``.

Hierarchy:
    RadarError
    ├── ConfigError
    │   ├── ConfigValidationError  (config breaks a data-model invariant)
    │   └── ParseError             (exchange text is not a JSON object)
    └── LayoutError                (geometry cannot be satisfied)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence


class RadarError(Exception):
    """Base class for all errors raised by techradar."""


class ConfigError(RadarError):
    """The radar configuration (or its exchange text) is unusable."""


@dataclass(frozen=True)
class ValidationProblem:
    """A single invariant violation, addressed by a dotted field path."""
    field: str
    message: str
    value: Any = None

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ConfigValidationError(ConfigError):
    """
    Raised when a config is malformed or violates the data-model invariants.

    The first problem becomes the exception message; all problems found in the
    same pass are kept in ``problems`` so a host can list them at once.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        problems: Sequence[ValidationProblem] = (),
    ) -> None:
        super().__init__(message)
        self.field = field
        self.value = value
        self.problems: tuple[ValidationProblem, ...] = tuple(problems) or (
            (ValidationProblem(field, message, value),) if field else ()
        )

    @classmethod
    def from_problems(cls, problems: Sequence[ValidationProblem]) -> ConfigValidationError:
        first = problems[0]
        message = str(first)
        if len(problems) > 1:
            message += f" (and {len(problems) - 1} more problem(s))"
        return cls(message, field=first.field, value=first.value, problems=problems)


class ParseError(ConfigError):
    """
    Raised when exchange text cannot be parsed into a JSON object.
    The original text is preserved so the host can show it or retry.
    """

    def __init__(self, reason: str, text: str) -> None:
        super().__init__(reason)
        self.reason = reason
        self.text = text


class LayoutError(RadarError):
    """Raised when a valid config cannot be laid out (e.g. no rings)."""
