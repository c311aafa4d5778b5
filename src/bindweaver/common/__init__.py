# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Common utilities shared across BindWeaver."""

from bindweaver.common.logging import setup_logger, setup_logger_from_settings


__all__ = ("setup_logger", "setup_logger_from_settings")
