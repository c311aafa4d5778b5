# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Structured diagnostics for declaration translation.

Builders never log directly. Each one hands back a `Built` value carrying the
descriptor (or `None` when the declaration is dropped) together with the
diagnostics it produced, keyed to the declaration's name. The caller decides
when to forward them to a logger.
"""

from __future__ import annotations

import logging

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from pydantic.dataclasses import dataclass as pydantic_dataclass

from bindweaver.core.types import DATACLASS_CONFIG, BaseEnum, DataclassSerializationMixin


class Severity(BaseEnum):
    """How bad a recorded diagnostic is. Fatal faults are raised, not recorded."""

    WARNING = "warning"
    """Recoverable; the declaration is dropped or the offending fact ignored."""
    ERROR = "error"
    """A fault worth a reviewer's attention that still lets the run continue."""

    @property
    def log_level(self) -> int:
        """The stdlib logging level for this severity."""
        return logging.WARNING if self is Severity.WARNING else logging.ERROR


@pydantic_dataclass(frozen=True, slots=True, config=DATACLASS_CONFIG)
class Diagnostic(DataclassSerializationMixin):
    """One warning or error about a declaration."""

    severity: Severity
    message: str
    declaration: str
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def warning(cls, declaration: str, message: str, **details: Any) -> Diagnostic:
        return cls(Severity.WARNING, message, declaration, details)

    @classmethod
    def error(cls, declaration: str, message: str, **details: Any) -> Diagnostic:
        return cls(Severity.ERROR, message, declaration, details)

    def __str__(self) -> str:
        return f"[{self.severity}] {self.declaration}: {self.message}"


@dataclass(frozen=True, slots=True)
class Built[T]:
    """The outcome of building one descriptor."""

    value: T | None
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def dropped(self) -> bool:
        return self.value is None


class DiagnosticLog:
    """Append-only collection of diagnostics for one translation run."""

    def __init__(self, diagnostics: Iterable[Diagnostic] = ()) -> None:
        self._diagnostics: list[Diagnostic] = list(diagnostics)

    def append(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        self._diagnostics.extend(diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(tuple(self._diagnostics))

    def __len__(self) -> int:
        return len(self._diagnostics)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self._diagnostics if d.severity is Severity.WARNING)

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self._diagnostics if d.severity is Severity.ERROR)

    def for_declaration(self, declaration: str) -> tuple[Diagnostic, ...]:
        """Return every diagnostic recorded against `declaration`."""
        return tuple(d for d in self._diagnostics if d.declaration == declaration)

    def emit(self, logger: logging.Logger) -> None:
        """Forward every diagnostic to `logger` at its severity's level."""
        for diagnostic in self._diagnostics:
            logger.log(
                diagnostic.severity.log_level,
                "%s: %s",
                diagnostic.declaration,
                diagnostic.message,
                extra={"declaration": diagnostic.declaration, "details": diagnostic.details},
            )


__all__ = ("Built", "Diagnostic", "DiagnosticLog", "Severity")
