# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Type resolution seam.

The builders only ever talk to types through `TypeResolver` and
`ResolvedType`. `SimpleTypeResolver` is a small resolver for the spellings
that show up in Foundation-style headers (`NSString * _Nullable`,
`id<NSCopying>`, `instancetype`, `NSError **`, plain C scalars); a full
C type translator can be dropped in anywhere it is accepted.
"""

from __future__ import annotations

import re

from collections.abc import Callable
from types import MappingProxyType
from typing import Protocol, Self, runtime_checkable

from bindweaver.core.types import BaseEnum, BasedModel
from bindweaver.exceptions import InvariantError
from bindweaver.semantic.declarations import ObjCQualifiers
from bindweaver.semantic.selectors import is_alloc, is_init, is_new


class MethodArgumentQualifier(BaseEnum):
    """The single qualifier allowed on a method argument."""

    IN = "in"
    INOUT = "inout"
    OUT = "out"

    @classmethod
    def parse(cls, qualifiers: ObjCQualifiers) -> Self:
        """Map a qualifier set to exactly one of `in`, `inout` or `out`.

        Raises:
            InvariantError: for any other combination.
        """
        match sorted(name for name, present in qualifiers.as_dict().items() if present):
            case ["in"]:
                return cls.IN
            case ["inout"]:
                return cls.INOUT
            case ["out"]:
                return cls.OUT
            case unsupported:
                raise InvariantError(
                    "unsupported argument qualifiers", details={"qualifiers": unsupported}
                )


@runtime_checkable
class ResolvedType(Protocol):
    """What the builders need to know about, and do to, a translated type."""

    def is_id(self) -> bool: ...

    def is_instancetype(self) -> bool: ...

    def is_error(self) -> bool: ...

    def argument_is_error_out(self) -> bool: ...

    def set_is_alloc(self) -> None: ...

    def set_is_error(self) -> None: ...

    def fix_related_result_type(self, is_class: bool, selector: str) -> None: ...

    def visit_required_types(self, f: Callable[[str], None]) -> None: ...

    def render(self, owner: str | None = None) -> str: ...


class TypeResolver(Protocol):
    """Turns raw type spellings into `ResolvedType`s for each position they occur in."""

    def parse_method_argument(
        self, raw: str, qualifier: MethodArgumentQualifier | None
    ) -> ResolvedType: ...

    def parse_method_return(self, raw: str) -> ResolvedType: ...

    def parse_property(self, raw: str, is_copy: bool) -> ResolvedType: ...

    def parse_property_return(self, raw: str, is_copy: bool) -> ResolvedType: ...

    def void_result(self) -> ResolvedType: ...


# ===========================================================================
# *                    Reference resolver
# ===========================================================================


class TyKind(BaseEnum):
    VOID = "void"
    PRIMITIVE = "primitive"
    OBJECT = "object"
    ID = "id"
    INSTANCETYPE = "instancetype"
    CLASS = "class"
    SEL = "sel"
    POINTER = "pointer"
    ERROR_OUT = "error_out"


class TyPosition(BaseEnum):
    ARGUMENT = "argument"
    RETURN = "return"
    PROPERTY = "property"
    PROPERTY_RETURN = "property_return"

    @property
    def is_result(self) -> bool:
        return self in (TyPosition.RETURN, TyPosition.PROPERTY_RETURN)


PRIMITIVES: MappingProxyType[str, str] = MappingProxyType({
    "BOOL": "bool",
    "bool": "bool",
    "char": "c_char",
    "unsigned char": "c_uchar",
    "short": "c_short",
    "unsigned short": "c_ushort",
    "int": "c_int",
    "unsigned int": "c_uint",
    "long": "c_long",
    "unsigned long": "c_ulong",
    "long long": "c_longlong",
    "unsigned long long": "c_ulonglong",
    "float": "c_float",
    "double": "c_double",
    "NSInteger": "NSInteger",
    "NSUInteger": "NSUInteger",
    "CGFloat": "CGFloat",
    "void": "c_void",
})

_DECORATIONS = re.compile(
    r"\b(?:_Nullable|_Nonnull|_Null_unspecified|nullable|nonnull|null_unspecified|"
    r"__kindof|__strong|__weak|__autoreleasing|__unsafe_unretained|const|struct|enum)\b"
)
_NULLABLE = re.compile(r"\b(?:_Nullable|nullable)\b")


def _is_class_name(base: str) -> bool:
    return base.isidentifier() and base[0].isupper() and base not in PRIMITIVES


class Ty(BasedModel):
    """A translated type in one position."""

    kind: TyKind
    position: TyPosition
    name: str | None = None
    generics: tuple[str, ...] = ()
    nullable: bool = False
    qualifier: MethodArgumentQualifier | None = None
    copied: bool = False
    alloc: bool = False
    error: bool = False

    def is_id(self) -> bool:
        return self.kind in (TyKind.OBJECT, TyKind.ID, TyKind.INSTANCETYPE)

    def is_instancetype(self) -> bool:
        return self.kind is TyKind.INSTANCETYPE

    def is_error(self) -> bool:
        return self.error

    def argument_is_error_out(self) -> bool:
        return self.kind is TyKind.ERROR_OUT

    def set_is_alloc(self) -> None:
        self.alloc = True

    def set_is_error(self) -> None:
        self.error = True

    def fix_related_result_type(self, is_class: bool, selector: str) -> None:
        """Treat a bare `id` result of an init/alloc/new method as `instancetype`."""
        if self.kind is not TyKind.ID or self.generics:
            return
        if (is_class and (is_alloc(selector) or is_new(selector))) or (
            not is_class and is_init(selector)
        ):
            self.kind = TyKind.INSTANCETYPE

    def visit_required_types(self, f: Callable[[str], None]) -> None:
        match self.kind:
            case TyKind.OBJECT:
                f(self.name or "NSObject")
                for generic in self.generics:
                    f(generic)
            case TyKind.ID:
                for protocol in self.generics:
                    f(protocol)
            case TyKind.PRIMITIVE | TyKind.POINTER if self.name and self.name not in PRIMITIVES:
                f(self.name)
            case TyKind.ERROR_OUT:
                f("NSError")
            case _:
                pass
        if self.error:
            f("NSError")

    def _object(self, owner: str | None = None) -> str:
        match self.kind:
            case TyKind.INSTANCETYPE:
                return owner or "Self"
            case TyKind.ID if self.generics:
                return f"ProtocolObject<dyn {' + '.join(self.generics)}>"
            case TyKind.ID:
                return "AnyObject"
            case _:
                inner = ", ".join(self.generics)
                return f"{self.name}<{inner}>" if inner else str(self.name)

    def _plain(self) -> str:
        match self.kind:
            case TyKind.VOID:
                return "()"
            case TyKind.PRIMITIVE:
                return PRIMITIVES.get(str(self.name), str(self.name))
            case TyKind.CLASS:
                return "&AnyClass"
            case TyKind.SEL:
                return "Sel"
            case TyKind.ERROR_OUT:
                return "*mut *mut NSError"
            case _:
                return f"*mut {PRIMITIVES.get(str(self.name), str(self.name))}"

    def render(self, owner: str | None = None) -> str:
        """Render in binding syntax. Results render as `""` when there is nothing to return.

        `owner` pins an `instancetype` to a concrete class instead of `Self`.
        """
        if self.position.is_result:
            return self._render_result(owner)
        if self.is_id():
            ref = f"&{self._object()}"
            return f"Option<{ref}>" if self.nullable else ref
        return self._plain()

    def _render_result(self, owner: str | None) -> str:
        if self.alloc:
            return "Option<Allocated<Self>>"
        if self.is_id():
            value = f"Id<{self._object(owner)}>"
            if self.error:
                return f"Result<{value}, Id<NSError>>"
            return f"Option<{value}>" if self.nullable else value
        if self.error:
            ok = "()" if self.name in ("BOOL", "bool") else self._plain()
            return f"Result<{ok}, Id<NSError>>"
        return "" if self.kind is TyKind.VOID else self._plain()


class SimpleTypeResolver:
    """Resolve common Objective-C type spellings into `Ty`."""

    def _parse(self, raw: str, position: TyPosition) -> Ty:
        nullable = bool(_NULLABLE.search(raw))
        spelled = " ".join(_DECORATIONS.sub(" ", raw).split())
        generics: tuple[str, ...] = ()
        if (start := spelled.find("<")) != -1 and (end := spelled.rfind(">")) > start:
            generics = tuple(
                arg.replace("*", "").strip() for arg in spelled[start + 1 : end].split(",")
            )
            spelled = spelled[:start] + spelled[end + 1 :]
        stars = spelled.count("*")
        base = " ".join(spelled.replace("*", " ").split())
        match base:
            case "void" if stars == 0:
                return Ty(kind=TyKind.VOID, position=position)
            case "instancetype":
                return Ty(kind=TyKind.INSTANCETYPE, position=position, nullable=nullable)
            case "id" if stars == 0:
                return Ty(kind=TyKind.ID, position=position, generics=generics, nullable=nullable)
            case "Class":
                return Ty(kind=TyKind.CLASS, position=position, nullable=nullable)
            case "SEL":
                return Ty(kind=TyKind.SEL, position=position)
            case "NSError" if stars == 2:
                return Ty(kind=TyKind.ERROR_OUT, position=position, name="NSError")
            case _ if stars == 1 and _is_class_name(base):
                return Ty(
                    kind=TyKind.OBJECT,
                    position=position,
                    name=base,
                    generics=generics,
                    nullable=nullable,
                )
        kind = TyKind.POINTER if stars else TyKind.PRIMITIVE
        return Ty(kind=kind, position=position, name=base, nullable=nullable)

    def parse_method_argument(self, raw: str, qualifier: MethodArgumentQualifier | None) -> Ty:
        ty = self._parse(raw, TyPosition.ARGUMENT)
        ty.qualifier = qualifier
        return ty

    def parse_method_return(self, raw: str) -> Ty:
        return self._parse(raw, TyPosition.RETURN)

    def parse_property(self, raw: str, is_copy: bool) -> Ty:
        # copy semantics belong to the stored/returned direction only
        return self._parse(raw, TyPosition.PROPERTY)

    def parse_property_return(self, raw: str, is_copy: bool) -> Ty:
        ty = self._parse(raw, TyPosition.PROPERTY_RETURN)
        ty.copied = is_copy
        return ty

    def void_result(self) -> Ty:
        return Ty(kind=TyKind.VOID, position=TyPosition.RETURN)


__all__ = (
    "PRIMITIVES",
    "MethodArgumentQualifier",
    "ResolvedType",
    "SimpleTypeResolver",
    "Ty",
    "TyKind",
    "TyPosition",
    "TypeResolver",
)
