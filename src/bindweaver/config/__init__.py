# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Configuration for BindWeaver."""

from bindweaver.config.logging import LoggingConfigDict, LoggingSettings
from bindweaver.config.settings import (
    BindWeaverSettings,
    ContainerData,
    MethodData,
    get_settings,
    reset_settings,
)


__all__ = (
    "BindWeaverSettings",
    "ContainerData",
    "LoggingConfigDict",
    "LoggingSettings",
    "MethodData",
    "get_settings",
    "reset_settings",
)
