# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Core types and diagnostics shared across BindWeaver."""

from bindweaver.core.diagnostics import Built, Diagnostic, DiagnosticLog, Severity
from bindweaver.core.types import BaseEnum, BasedModel


__all__ = ("BaseEnum", "BasedModel", "Built", "Diagnostic", "DiagnosticLog", "Severity")
