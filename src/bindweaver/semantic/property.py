# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Expansion of `@property` declarations into accessor descriptors.

A property becomes a getter (unless skipped) and, when it is writable, a
setter. Both accessors share the property's availability and optionality but
are configured independently.
"""

from __future__ import annotations

import logging

from dataclasses import dataclass
from typing import TYPE_CHECKING

from bindweaver.core.diagnostics import Built, Diagnostic
from bindweaver.exceptions import InvariantError
from bindweaver.semantic.declarations import DeclAttributeKind, PropertyDecl
from bindweaver.semantic.memory import MemoryManagement, MemoryManagementFold
from bindweaver.semantic.method import Method, check_mutating, unexposed_macro


if TYPE_CHECKING:
    from bindweaver.config.settings import MethodData
    from bindweaver.semantic.ty import TypeResolver


logger = logging.getLogger(__name__)

type Accessors = tuple[Method | None, Method | None]


@dataclass(slots=True)
class PartialProperty:
    """A property whose accessor names are known but not yet analyzed."""

    decl: PropertyDecl
    name: str
    getter_name: str
    setter_name: str | None
    is_class: bool
    is_copy: bool

    @classmethod
    def from_decl(cls, decl: PropertyDecl) -> PartialProperty:
        attributes = decl.property_attributes
        has_setter = not attributes.readonly if attributes is not None else True
        return cls(
            decl=decl,
            name=decl.name,
            getter_name=decl.getter,
            setter_name=decl.setter.rstrip(":") if has_setter else None,
            is_class=attributes.class_ if attributes is not None else False,
            is_copy=attributes.copy_ if attributes is not None else False,
        )

    @property
    def setter_selector(self) -> str | None:
        return f"{self.setter_name}:" if self.setter_name is not None else None

    def _fold_attributes(self, diagnostics: list[Diagnostic]) -> MemoryManagement:
        fold = MemoryManagementFold(self.getter_name)
        for attribute in self.decl.attributes:
            match attribute.kind:
                case kind if kind.is_reference:
                    pass
                case DeclAttributeKind.RETURNS_INNER_POINTER:
                    fold.returns_inner_pointer()
                case DeclAttributeKind.INSTANCE_METHOD:
                    diagnostics.append(Diagnostic.warning(self.name, "method in property"))
                case DeclAttributeKind.IB_OUTLET:
                    pass
                case DeclAttributeKind.UNEXPOSED:
                    if diagnostic := unexposed_macro(attribute, self.name):
                        diagnostics.append(diagnostic)
                case kind:
                    diagnostics.append(
                        Diagnostic.error(self.name, "unknown attribute", kind=kind.value)
                    )
        return fold.finish()

    def parse(
        self, getter_data: MethodData, setter_data: MethodData | None, resolver: TypeResolver
    ) -> Built[Accessors]:
        """Expand the property into its getter and setter.

        Returns a `Built` with no value when both accessors are skipped.

        Raises:
            ConsistencyError: on a fatal consistency fault in either accessor.
            InvariantError: when the property has a setter but no setter configuration.
        """
        logger.debug("property %s", self.name)
        setter_skipped = setter_data.skipped if setter_data is not None else True
        if getter_data.skipped and setter_skipped:
            return Built(None)

        diagnostics: list[Diagnostic] = []
        memory_management = self._fold_attributes(diagnostics)

        if self.decl.qualifiers is not None:
            diagnostics.append(
                Diagnostic.error(
                    self.name,
                    "properties do not support qualifiers",
                    qualifiers=self.decl.qualifiers.as_dict(),
                )
            )

        getter: Method | None = None
        if not getter_data.skipped:
            check_mutating(self.getter_name, is_class=self.is_class, mutating=getter_data.mutating)
            result_type = resolver.parse_property_return(self.decl.type, self.is_copy)
            if result_type.is_id():
                memory_management.verify_sel(self.getter_name)
            getter = Method(
                selector=self.getter_name,
                fn_name=self.getter_name,
                availability=self.decl.availability,
                is_class=self.is_class,
                is_optional_protocol=self.decl.is_optional,
                memory_management=memory_management,
                arguments=(),
                result_type=result_type,
                safe=not getter_data.unsafe,
                mutating=getter_data.mutating,
            )

        setter: Method | None = None
        if self.setter_name is not None and (selector := self.setter_selector):
            if setter_data is None:
                raise InvariantError(
                    "setter configuration must be present when the property has a setter",
                    details={"declaration": self.name, "selector": selector},
                )
            if not setter_data.skipped:
                check_mutating(selector, is_class=self.is_class, mutating=setter_data.mutating)
                setter = Method(
                    selector=selector,
                    fn_name=self.setter_name,
                    availability=self.decl.availability,
                    is_class=self.is_class,
                    is_optional_protocol=self.decl.is_optional,
                    memory_management=MemoryManagement.NORMAL,
                    arguments=((self.name, resolver.parse_property(self.decl.type, self.is_copy)),),
                    result_type=resolver.void_result(),
                    safe=not setter_data.unsafe,
                    mutating=setter_data.mutating,
                )

        return Built((getter, setter), tuple(diagnostics))


__all__ = ("Accessors", "PartialProperty")
