# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Shared base types for BindWeaver models and enums."""

from bindweaver.core.types.dataclasses import DATACLASS_CONFIG, DataclassSerializationMixin
from bindweaver.core.types.enum import BaseEnum
from bindweaver.core.types.models import BASEDMODEL_CONFIG, FROZEN_BASEDMODEL_CONFIG, BasedModel


__all__ = (
    "BASEDMODEL_CONFIG",
    "DATACLASS_CONFIG",
    "FROZEN_BASEDMODEL_CONFIG",
    "BaseEnum",
    "BasedModel",
    "DataclassSerializationMixin",
)
