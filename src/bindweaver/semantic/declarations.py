# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Raw declaration facts handed over by the header extractor.

These models mirror what clang exposes for an Objective-C interface: the
selector, scope, arguments with their raw type spellings, and the attribute
children attached to the declaration node. Nothing here is interpreted yet.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Annotated, Any

from pydantic import Field, model_validator

from bindweaver.core.types import FROZEN_BASEDMODEL_CONFIG, BaseEnum, BasedModel


class DeclAttributeKind(BaseEnum):
    """Kinds of children clang attaches to method, property and argument nodes."""

    CLASS_REF = "class_ref"
    PROTOCOL_REF = "protocol_ref"
    TYPE_REF = "type_ref"
    PARM_DECL = "parm_decl"
    INTEGER_LITERAL = "integer_literal"
    DESIGNATED_INITIALIZER = "designated_initializer"
    CONSUMES_SELF = "consumes_self"
    CONSUMED = "consumed"
    RETURNS_RETAINED = "returns_retained"
    RETURNS_NOT_RETAINED = "returns_not_retained"
    RETURNS_AUTORELEASED = "returns_autoreleased"
    RETURNS_INNER_POINTER = "returns_inner_pointer"
    IB_ACTION = "ib_action"
    IB_OUTLET = "ib_outlet"
    REQUIRES_SUPER = "requires_super"
    WARN_UNUSED_RESULT = "warn_unused_result"
    UNEXPOSED = "unexposed"
    INSTANCE_METHOD = "instance_method"

    @property
    def alias(self) -> str:
        """The clang `EntityKind` spelling of this kind."""
        return _CLANG_NAMES[self]

    @property
    def is_reference(self) -> bool:
        """References to other declarations carry no semantics of their own."""
        return self in _REFERENCES


_CLANG_NAMES: MappingProxyType[DeclAttributeKind, str] = MappingProxyType({
    DeclAttributeKind.CLASS_REF: "ObjCClassRef",
    DeclAttributeKind.PROTOCOL_REF: "ObjCProtocolRef",
    DeclAttributeKind.TYPE_REF: "TypeRef",
    DeclAttributeKind.PARM_DECL: "ParmDecl",
    DeclAttributeKind.INTEGER_LITERAL: "IntegerLiteral",
    DeclAttributeKind.DESIGNATED_INITIALIZER: "ObjCDesignatedInitializer",
    DeclAttributeKind.CONSUMES_SELF: "NSConsumesSelf",
    DeclAttributeKind.CONSUMED: "NSConsumed",
    DeclAttributeKind.RETURNS_RETAINED: "NSReturnsRetained",
    DeclAttributeKind.RETURNS_NOT_RETAINED: "NSReturnsNotRetained",
    DeclAttributeKind.RETURNS_AUTORELEASED: "NSReturnsAutoreleased",
    DeclAttributeKind.RETURNS_INNER_POINTER: "ObjCReturnsInnerPointer",
    DeclAttributeKind.IB_ACTION: "IbActionAttr",
    DeclAttributeKind.IB_OUTLET: "IbOutletAttr",
    DeclAttributeKind.REQUIRES_SUPER: "ObjCRequiresSuper",
    DeclAttributeKind.WARN_UNUSED_RESULT: "WarnUnusedResultAttr",
    DeclAttributeKind.UNEXPOSED: "UnexposedAttr",
    DeclAttributeKind.INSTANCE_METHOD: "ObjCInstanceMethodDecl",
})

_REFERENCES = frozenset({
    DeclAttributeKind.CLASS_REF,
    DeclAttributeKind.PROTOCOL_REF,
    DeclAttributeKind.TYPE_REF,
    DeclAttributeKind.PARM_DECL,
})

# Macros clang leaves unexposed that carry nothing the bindings need.
KNOWN_MACROS: frozenset[str] = frozenset({
    "NS_SWIFT_NAME",
    "NS_SWIFT_UNAVAILABLE",
    "NS_REFINED_FOR_SWIFT",
    "NS_SWIFT_ASYNC",
    "NS_SWIFT_UI_ACTOR",
    "NS_SWIFT_SENDABLE",
    "NS_SWIFT_NONISOLATED",
    "NS_FORMAT_FUNCTION",
    "NS_FORMAT_ARGUMENT",
    "NS_NOESCAPE",
    "NS_REQUIRES_NIL_TERMINATION",
    "API_AVAILABLE",
    "API_DEPRECATED",
    "API_DEPRECATED_WITH_REPLACEMENT",
    "API_UNAVAILABLE",
    "NS_AVAILABLE",
    "NS_DEPRECATED",
    "__TVOS_PROHIBITED",
    "__WATCHOS_PROHIBITED",
})


class DeclAttribute(BasedModel):
    """One attribute child of a declaration node.

    Only `UNEXPOSED` attributes carry a payload: the name of the macro that
    expanded to them, when the extractor could recover it.
    """

    model_config = FROZEN_BASEDMODEL_CONFIG

    kind: DeclAttributeKind
    macro: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str | DeclAttributeKind):
            return {"kind": data}
        return data

    @property
    def is_known_macro(self) -> bool:
        return self.macro is not None and self.macro.split("(", 1)[0].strip() in KNOWN_MACROS


class ObjCQualifiers(BasedModel):
    """Distributed-objects qualifiers written on an argument or return type."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    in_: Annotated[bool, Field(alias="in")] = False
    inout: bool = False
    out: bool = False
    bycopy: bool = False
    byref: bool = False
    oneway: bool = False

    def as_dict(self) -> dict[str, bool]:
        return self.model_dump(by_alias=True)


class Availability(BasedModel):
    """Platform availability facts, kept as given by the extractor."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    introduced: dict[str, str] = Field(default_factory=dict)
    deprecated: dict[str, str] = Field(default_factory=dict)
    unavailable: frozenset[str] = frozenset()
    message: str | None = None

    @property
    def is_deprecated(self) -> bool:
        return bool(self.deprecated)


class ArgumentDecl(BasedModel):
    """A method argument."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    name: str
    type: str
    qualifiers: ObjCQualifiers | None = None
    attributes: tuple[DeclAttribute, ...] = ()


class MethodDecl(BasedModel):
    """An `ObjCInstanceMethodDecl` or `ObjCClassMethodDecl`."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    selector: str
    result_type: str
    is_class: bool = False
    is_variadic: bool = False
    is_optional: bool = False
    arguments: tuple[ArgumentDecl, ...] = ()
    result_qualifiers: ObjCQualifiers | None = None
    attributes: tuple[DeclAttribute, ...] = ()
    availability: Availability = Field(default_factory=Availability)


class PropertyAttributes(BasedModel):
    """The `@property (...)` attribute list. Only what affects accessors is kept."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    readonly: bool = False
    copy_: Annotated[bool, Field(alias="copy")] = False
    class_: Annotated[bool, Field(alias="class")] = False


class PropertyDecl(BasedModel):
    """An `ObjCPropertyDecl`."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    name: str
    type: str
    getter_name: str | None = None
    setter_name: str | None = None
    property_attributes: PropertyAttributes | None = None
    qualifiers: ObjCQualifiers | None = None
    attributes: tuple[DeclAttribute, ...] = ()
    is_optional: bool = False
    availability: Availability = Field(default_factory=Availability)

    @property
    def getter(self) -> str:
        return self.getter_name or self.name

    @property
    def setter(self) -> str:
        """The setter selector clang reports, with its trailing colon."""
        return self.setter_name or f"set{self.name[:1].upper()}{self.name[1:]}:"


class ContainerKind(BaseEnum):
    """What kind of Objective-C container the declarations live in."""

    CLASS = "class"
    PROTOCOL = "protocol"
    CATEGORY = "category"


class ContainerDecl(BasedModel):
    """An `@interface`, `@protocol` or category with its member declarations."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    name: str
    kind: ContainerKind = ContainerKind.CLASS
    superclass: str | None = None
    methods: tuple[MethodDecl, ...] = ()
    properties: tuple[PropertyDecl, ...] = ()


__all__ = (
    "KNOWN_MACROS",
    "ArgumentDecl",
    "Availability",
    "ContainerDecl",
    "ContainerKind",
    "DeclAttribute",
    "DeclAttributeKind",
    "MethodDecl",
    "ObjCQualifiers",
    "PropertyAttributes",
    "PropertyDecl",
)
