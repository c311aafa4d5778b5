# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""BindWeaver: memory-safe binding descriptors from Objective-C headers."""

from bindweaver._version import __version__
from bindweaver.exceptions import (
    BindWeaverError,
    ConfigurationError,
    ConsistencyError,
    InvariantError,
)


__all__ = (
    "BindWeaverError",
    "ConfigurationError",
    "ConsistencyError",
    "InvariantError",
    "__version__",
)
