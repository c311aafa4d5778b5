# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Method descriptors and the builder that produces them from raw declarations.

Building a descriptor is a single synchronous pass:

1. drop skipped and variadic declarations;
2. resolve arguments and strip a trailing `NSError **` out-parameter, making
   the result fallible instead;
3. resolve the result type, upgrading related result types and marking
   allocator returns;
4. fold the attached attributes into a `MemoryManagement` contract;
5. verify the contract against the selector family;
6. check the configured `mutating` flag.

Fatal faults raise `ConsistencyError`; everything recoverable comes back as a
`Diagnostic` alongside the descriptor.
"""

from __future__ import annotations

import logging

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from bindweaver.core.diagnostics import Built, Diagnostic
from bindweaver.exceptions import ConsistencyError
from bindweaver.semantic.declarations import (
    Availability,
    DeclAttribute,
    DeclAttributeKind,
    MethodDecl,
)
from bindweaver.semantic.memory import MemoryManagement, MemoryManagementFold
from bindweaver.semantic.selectors import (
    RetainSemantics,
    binding_name,
    is_alloc,
    is_init,
    retain_semantics_for,
)
from bindweaver.semantic.ty import MethodArgumentQualifier


if TYPE_CHECKING:
    from bindweaver.config.settings import MethodData
    from bindweaver.semantic.ty import ResolvedType, TypeResolver


logger = logging.getLogger(__name__)

_SUBCLASS_EXEMPT_CLASS_SELECTORS = frozenset({"new", "supportsSecureCoding"})
_SUBCLASS_EXEMPT_INIT_SELECTORS = frozenset({"init", "initWithCoder:"})


@dataclass(frozen=True, slots=True)
class Method:
    """A completed, self-consistent method binding descriptor."""

    selector: str
    fn_name: str
    availability: Availability
    is_class: bool
    is_optional_protocol: bool
    memory_management: MemoryManagement
    arguments: tuple[tuple[str, ResolvedType], ...]
    result_type: ResolvedType
    safe: bool
    mutating: bool
    is_designated_initializer: bool = False
    must_use: bool = False
    generic_over_subclass: bool = False

    def id(self) -> tuple[bool, str]:
        """Value that uniquely identifies the method in a class."""
        return (self.is_class, self.selector)

    @property
    def retain_semantics(self) -> RetainSemantics:
        return retain_semantics_for(self.selector)

    def verify(self) -> None:
        """Re-check the selector family against the contract for object results."""
        if self.result_type.is_id():
            self.memory_management.verify_sel(self.selector)

    def update(self, data: MethodData) -> Method | None:
        """Apply a late configuration override. Returns `None` when skipped."""
        if data.skipped:
            return None
        check_mutating(self.selector, is_class=self.is_class, mutating=data.mutating)
        return replace(self, safe=not data.unsafe, mutating=data.mutating)

    def visit_required_types(self, f: Callable[[str], None]) -> None:
        for _, arg in self.arguments:
            arg.visit_required_types(f)
        self.result_type.visit_required_types(f)

    def returns_related_type(self) -> bool:
        """Whether the result is the receiver's own type for an allocator or initializer."""
        return self.result_type.is_instancetype() and (
            (self.is_class and is_alloc(self.selector))
            or self.memory_management is MemoryManagement.INIT
        )

    def emit_on_subclasses(self) -> bool:
        """Whether every subclass needs its own copy of this binding.

        Methods returning the receiver's own type have to be specialized per
        subclass, except for the few that every class already provides.
        """
        if not self.result_type.is_instancetype():
            return False
        if self.is_class:
            return self.selector not in _SUBCLASS_EXEMPT_CLASS_SELECTORS
        return (
            self.memory_management is MemoryManagement.INIT
            and self.selector not in _SUBCLASS_EXEMPT_INIT_SELECTORS
        )

    def __str__(self) -> str:
        from bindweaver.semantic.formatter import format_method

        return format_method(self)


def apply_related_result_type(methods: Iterable[Method]) -> tuple[Method, ...]:
    """Tag methods whose binding must be generic over the concrete subclass.

    Tagged methods render their covariant result as `Self`; untagged ones are
    pinned to the class that declares or re-emits them. Idempotent, and
    independent of the order of `methods`.
    """
    return tuple(
        replace(method, generic_over_subclass=True)
        if method.returns_related_type() and not method.generic_over_subclass
        else method
        for method in methods
    )


def check_mutating(selector: str, *, is_class: bool, mutating: bool) -> None:
    """Initializers and class methods have no receiver to borrow mutably."""
    if mutating and (is_class or is_init(selector)):
        raise ConsistencyError(
            "invalid mutating method",
            selector=selector,
            invariant="invalid-mutating",
            suggestions=["Remove `mutating` from this declaration's configuration"],
        )


def unexposed_macro(attribute: DeclAttribute, declaration: str) -> Diagnostic | None:
    """Warn about a macro we don't recognize. Known macros are dropped silently."""
    if attribute.is_known_macro:
        return None
    return Diagnostic.warning(declaration, "unknown macro", macro=attribute.macro)


@dataclass(slots=True)
class PartialMethod:
    """A method declaration whose selector and scope are known but not yet analyzed."""

    decl: MethodDecl
    selector: str
    is_class: bool
    fn_name: str

    @classmethod
    def from_decl(cls, decl: MethodDecl) -> PartialMethod:
        return cls(
            decl=decl,
            selector=decl.selector,
            is_class=decl.is_class,
            fn_name=binding_name(decl.selector),
        )

    def _parse_arguments(
        self, resolver: TypeResolver, diagnostics: list[Diagnostic]
    ) -> list[tuple[str, ResolvedType]]:
        arguments: list[tuple[str, ResolvedType]] = []
        for argument in self.decl.arguments:
            qualifier = (
                MethodArgumentQualifier.parse(argument.qualifiers)
                if argument.qualifiers is not None
                else None
            )
            for attribute in argument.attributes:
                match attribute.kind:
                    case kind if kind.is_reference:
                        pass
                    case DeclAttributeKind.INTEGER_LITERAL:
                        # array bounds in the argument's type
                        pass
                    case DeclAttributeKind.CONSUMED:
                        raise ConsistencyError(
                            "found NSConsumed, which requires manual handling",
                            selector=self.selector,
                            invariant="unsupported-attribute",
                            details={"argument": argument.name},
                        )
                    case DeclAttributeKind.UNEXPOSED:
                        if diagnostic := unexposed_macro(attribute, self.fn_name):
                            diagnostics.append(diagnostic)
                    case kind:
                        diagnostics.append(
                            Diagnostic.error(
                                self.fn_name,
                                "unknown attribute on argument",
                                argument=argument.name,
                                kind=kind.value,
                            )
                        )
            arguments.append((
                argument.name,
                resolver.parse_method_argument(argument.type, qualifier),
            ))
        return arguments

    def _fold_attributes(
        self, diagnostics: list[Diagnostic]
    ) -> tuple[MemoryManagement, bool, bool]:
        fold = MemoryManagementFold(self.selector)
        must_use = False
        for attribute in self.decl.attributes:
            match attribute.kind:
                case kind if kind.is_reference:
                    pass
                case DeclAttributeKind.DESIGNATED_INITIALIZER:
                    fold.designated_initializer()
                case DeclAttributeKind.CONSUMES_SELF:
                    fold.consumes_self()
                case DeclAttributeKind.RETURNS_AUTORELEASED:
                    fold.returns_autoreleased()
                case DeclAttributeKind.RETURNS_RETAINED:
                    fold.returns_retained()
                case DeclAttributeKind.RETURNS_NOT_RETAINED:
                    fold.returns_not_retained()
                case DeclAttributeKind.RETURNS_INNER_POINTER:
                    fold.returns_inner_pointer()
                case DeclAttributeKind.IB_ACTION | DeclAttributeKind.REQUIRES_SUPER:
                    pass
                case DeclAttributeKind.WARN_UNUSED_RESULT:
                    must_use = True
                case DeclAttributeKind.UNEXPOSED:
                    if diagnostic := unexposed_macro(attribute, self.fn_name):
                        diagnostics.append(diagnostic)
                case kind:
                    diagnostics.append(
                        Diagnostic.error(self.fn_name, "unknown attribute", kind=kind.value)
                    )
        return fold.finish(), fold.designated, must_use

    def parse(self, data: MethodData, resolver: TypeResolver) -> Built[Method]:
        """Analyze the declaration into a `Method`.

        Returns a `Built` with no value when the declaration is skipped or variadic.

        Raises:
            ConsistencyError: on any fatal consistency fault.
            InvariantError: on argument qualifiers the grammar cannot produce.
        """
        logger.debug("method %s", self.fn_name)
        if data.skipped:
            return Built(None)

        if self.decl.is_variadic:
            return Built(None, (Diagnostic.warning(self.fn_name, "can't handle variadic method"),))

        diagnostics: list[Diagnostic] = []
        arguments = self._parse_arguments(resolver, diagnostics)

        is_error = bool(arguments) and arguments[-1][1].argument_is_error_out()
        if is_error:
            arguments.pop()

        if self.decl.result_qualifiers is not None:
            diagnostics.append(
                Diagnostic.error(
                    self.fn_name,
                    "unsupported qualifiers on return type",
                    qualifiers=self.decl.result_qualifiers.as_dict(),
                )
            )

        result_type = resolver.parse_method_return(self.decl.result_type)
        result_type.fix_related_result_type(self.is_class, self.selector)
        if self.is_class and is_alloc(self.selector):
            result_type.set_is_alloc()
        if is_error:
            result_type.set_is_error()

        memory_management, designated_initializer, must_use = self._fold_attributes(diagnostics)

        if result_type.is_id():
            memory_management.verify_sel(self.selector)

        check_mutating(self.selector, is_class=self.is_class, mutating=data.mutating)

        method = Method(
            selector=self.selector,
            fn_name=self.fn_name,
            availability=self.decl.availability,
            is_class=self.is_class,
            is_optional_protocol=self.decl.is_optional,
            memory_management=memory_management,
            arguments=tuple(arguments),
            result_type=result_type,
            safe=not data.unsafe,
            mutating=data.mutating,
            is_designated_initializer=designated_initializer,
            must_use=must_use,
        )
        return Built(method, tuple(diagnostics))


__all__ = (
    "Method",
    "PartialMethod",
    "apply_related_result_type",
    "check_mutating",
    "unexposed_macro",
)
