# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Dataclass configuration and serialization mixin."""

from typing import Any, Self

from pydantic import ConfigDict, TypeAdapter

from bindweaver.core.types.utils import generate_field_title, generate_title


DATACLASS_CONFIG = ConfigDict(
    arbitrary_types_allowed=True,
    cache_strings="keys",
    field_title_generator=generate_field_title,
    model_title_generator=generate_title,
    serialize_by_alias=True,
    str_strip_whitespace=True,
    use_attribute_docstrings=True,
    validate_by_alias=True,
    validate_by_name=True,
)


class DataclassSerializationMixin:
    """Serialization helpers for pydantic dataclasses, backed by `TypeAdapter`."""

    def _adapter(self) -> TypeAdapter[Self]:
        return TypeAdapter(type(self))

    def dump_json(self, **kwargs: Any) -> bytes:
        """Serialize the dataclass to JSON bytes."""
        return self._adapter().dump_json(self, **kwargs)

    def dump_python(self, **kwargs: Any) -> dict[str, Any]:
        """Serialize the dataclass to a Python dictionary."""
        return self._adapter().dump_python(self, **kwargs)

    @classmethod
    def validate_python(cls, data: dict[str, Any], **kwargs: Any) -> Self:
        """Deserialize the dataclass from a Python dictionary."""
        return TypeAdapter(cls).validate_python(data, **kwargs)


__all__ = ("DATACLASS_CONFIG", "DataclassSerializationMixin")
