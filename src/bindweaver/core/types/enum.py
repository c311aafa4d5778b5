# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Base enum class for the BindWeaver project."""

from __future__ import annotations

import contextlib

from collections.abc import Generator
from enum import Enum, unique
from functools import cached_property
from types import MappingProxyType
from typing import Self, cast, override

import textcase


@unique
class BaseEnum(Enum):
    """An enum class that provides common functionality for all enums in the BindWeaver project. Enum members must be unique and either all strings or all integers.

    BaseEnum provides convenience methods for converting between strings and enum members, checking membership, and retrieving members and members' values. Declaration facts arrive from the extractor as loosely-formatted strings (`NSReturnsRetained`, `ns_returns_retained`, `returns-retained`), so lookups are forgiving about case and separators.
    """

    @staticmethod
    def _deconstruct_string(value: str) -> list[str]:
        """Deconstruct a string into its component parts."""
        value = textcase.snake(value.strip())
        for underscore_length in range(4, 0, -1):
            value = value.replace("_" * underscore_length, "_")
        return [v for v in value.split("_") if v]

    @staticmethod
    def _multiply_variations(s: str) -> set[str]:
        """Generate multiple variations of a string."""
        return {
            s,
            textcase.upper(s),
            textcase.lower(s),
            textcase.pascal(s),
            textcase.snake(s),
            textcase.kebab(s),
            textcase.camel(s),
        }

    @cached_property
    def aka(self) -> tuple[str, ...]:
        """Return the known spellings of the enum member."""
        names: set[str] = {self.name, self.variable}
        if isinstance(self.value, str):
            names.add(self.value)
        if alias := getattr(self, "alias", None):
            if isinstance(alias, str):
                names.add(alias)
            elif isinstance(alias, list | tuple):
                names |= set(alias)  # type: ignore
        names |= {n for name in names.copy() for n in self._multiply_variations(name)}
        return tuple(sorted(names))

    @classmethod
    @override
    def _missing_(cls, value: object) -> Self | None:
        """Handle missing values when converting from string to enum member."""
        if not isinstance(value, str):
            return None
        with contextlib.suppress(ValueError):
            return cls.from_string(value)
        return None

    @classmethod
    def aliases(cls) -> MappingProxyType[str, Self]:
        """Provides a way to identify alternate names for a member, used in string conversion and identification."""
        alias_map: dict[str, Self] = {
            str(value): cast(Self, member) for value, member in cls._value2member_map_.items()
        }
        alias_map.update({
            alias: member for member in cls for alias in member.aka if alias not in alias_map
        })
        return MappingProxyType(alias_map)

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Convert a string to the corresponding enum member. Flexibly handles different cases, dashes vs underscores, and camel case."""
        if literal_value := next(
            (
                member
                for member in cls
                if str(member.value).lower() == value.lower()
                or member.name.lower() == value.lower()
            ),
            None,
        ):
            return literal_value
        if found_member := next(
            (member for alias, member in cls.aliases().items() if alias.lower() == value.lower()),
            None,
        ):
            return found_member
        value_parts = cls._deconstruct_string(value)
        if found_member := next(
            (member for member in cls if cls._deconstruct_string(member.name) == value_parts), None
        ):
            return found_member
        raise ValueError(f"{value} is not a valid {cls.__qualname__} member")

    @classmethod
    def is_member(cls, value: str) -> bool:
        """Check if a value is a member of the enum."""
        try:
            cls.from_string(value)
        except ValueError:
            return False
        return True

    @property
    def variable(self) -> str:
        """Return the string representation of the enum member as a variable name."""
        return textcase.snake(self.name)

    @classmethod
    def members(cls) -> Generator[Self]:
        """Return all members of the enum."""
        yield from cls

    @classmethod
    def values(cls) -> Generator[str | int]:
        """Return all enum member values."""
        yield from (member.value for member in cls)

    def __str__(self) -> str:
        """Return the string representation of the enum member."""
        return self.name.replace("_", " ").lower()


__all__ = ("BaseEnum",)
