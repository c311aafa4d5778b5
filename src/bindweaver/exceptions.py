# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Unified exception hierarchy for BindWeaver.

Recoverable problems with a declaration are never raised; they travel as
`bindweaver.core.diagnostics.Diagnostic` values. Exceptions are reserved for
translations that cannot be trusted to produce a memory-safe binding.
"""

from __future__ import annotations

from typing import Any


class BindWeaverError(Exception):
    """Base exception for all BindWeaver errors.

    Provides structured error information including details and suggestions
    for resolution.
    """

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        """Initialize BindWeaver error.

        Args:
            message: Human-readable error message
            details: Additional context about the error
            suggestions: Actionable suggestions for resolving the error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        """Return descriptive error message with context details."""
        parts = [self.message]

        if self.details:
            detail_parts = [
                f"{key.replace('_', ' ')}: {self.details[key]}"
                for key in ("declaration", "selector", "invariant")
                if key in self.details
            ]
            if detail_parts:
                parts.append(f"({', '.join(detail_parts)})")

        return " ".join(parts)

    @property
    def report(self) -> str:
        """Generate a full error report including details and suggestions."""
        return "\n".join((
            f"- Error Message: {self.message}",
            "- Details: " + ", ".join(f"{k}: {v}" for k, v in self.details.items())
            if self.details
            else "- No additional details provided.",
            "- Suggestions: " + ", ".join(self.suggestions)
            if self.suggestions
            else "- No suggestions provided.",
        ))


class ConsistencyError(BindWeaverError):
    """Fatal consistency fault.

    Raised when the selector naming convention, the attached attributes, or the
    configuration overrides disagree about a declaration's memory-management
    contract. Emitting a descriptor in this state could produce a binding that
    leaks or frees too early, so translation stops instead.
    """

    def __init__(
        self,
        message: str,
        *,
        selector: str,
        invariant: str,
        details: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        """Initialize ConsistencyError.

        Args:
            selector: The selector of the declaration being translated
            invariant: Short machine-readable name of the violated rule
        """
        super().__init__(
            message,
            details={"selector": selector, "invariant": invariant, **(details or {})},
            suggestions=suggestions,
        )
        self.selector = selector
        self.invariant = invariant


class InvariantError(BindWeaverError):
    """Malformed upstream input.

    Raised for shapes the Objective-C grammar cannot produce, such as
    contradictory argument qualifiers or a selector that belongs to two
    retain-semantics families at once. Seeing one means the extractor is broken.
    """


class ConfigurationError(BindWeaverError):
    """Configuration and settings errors.

    Raised when there are issues with configuration files, environment variables,
    or per-declaration override records.
    """


__all__ = ("BindWeaverError", "ConfigurationError", "ConsistencyError", "InvariantError")
