# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Translate whole containers and class hierarchies into method descriptors.

Every declaration is built independently. Once all of a container's
descriptors exist, the related-result-type fix-up runs over them, and once
every container exists, covariant methods are re-emitted on subclasses.
"""

from __future__ import annotations

import logging

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace

from bindweaver.common.logging import setup_logger_from_settings
from bindweaver.config.settings import BindWeaverSettings, get_settings
from bindweaver.core.diagnostics import Built, Diagnostic, DiagnosticLog
from bindweaver.exceptions import ConsistencyError
from bindweaver.semantic.declarations import ContainerDecl, ContainerKind, MethodDecl, PropertyDecl
from bindweaver.semantic.method import Method, PartialMethod, apply_related_result_type
from bindweaver.semantic.property import Accessors, PartialProperty
from bindweaver.semantic.ty import SimpleTypeResolver, TypeResolver


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ContainerBindings:
    """All descriptors produced for one class, protocol or category."""

    name: str
    kind: ContainerKind
    superclass: str | None
    methods: tuple[Method, ...]
    designated_initializers: tuple[str, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()
    inherited: tuple[Method, ...] = ()
    """Methods re-emitted from superclasses because they return the receiver's own type."""

    def find(self, selector: str, *, is_class: bool = False) -> Method | None:
        return next((m for m in self.methods if m.id() == (is_class, selector)), None)

    @property
    def owner(self) -> str | None:
        """The concrete class covariant results are pinned to, if any."""
        return self.name if self.kind is ContainerKind.CLASS else None

    def required_types(self) -> frozenset[str]:
        """Every named type the container's bindings depend on."""
        names: set[str] = set()
        for method in (*self.methods, *self.inherited):
            method.visit_required_types(names.add)
        return frozenset(names)


class Translator:
    """Runs the method and property builders over containers."""

    def __init__(
        self,
        resolver: TypeResolver | None = None,
        settings: BindWeaverSettings | None = None,
    ) -> None:
        self.resolver: TypeResolver = resolver or SimpleTypeResolver()
        self.settings = settings or get_settings()
        self.diagnostics = DiagnosticLog()

    def _guard[T](self, declaration: str, build: Callable[[], Built[T]]) -> Built[T]:
        try:
            return build()
        except ConsistencyError as e:
            if self.settings.fail_fast:
                raise
            logger.debug("dropping %s after a consistency fault", declaration)
            return Built(
                None,
                (
                    Diagnostic.error(
                        declaration, e.message, selector=e.selector, invariant=e.invariant
                    ),
                ),
            )

    def translate_method(self, container: str, decl: MethodDecl) -> Built[Method]:
        partial = PartialMethod.from_decl(decl)
        data = self.settings.method_data(container, partial.selector)
        return self._guard(partial.fn_name, lambda: partial.parse(data, self.resolver))

    def translate_property(self, container: str, decl: PropertyDecl) -> Built[Accessors]:
        partial = PartialProperty.from_decl(decl)
        getter_data = self.settings.method_data(container, partial.getter_name)
        setter_data = (
            self.settings.method_data(container, selector)
            if (selector := partial.setter_selector)
            else None
        )
        return self._guard(
            partial.name, lambda: partial.parse(getter_data, setter_data, self.resolver)
        )

    def translate_container(self, decl: ContainerDecl) -> ContainerBindings | None:
        """Build every declaration in `decl`. Returns `None` when the container is skipped."""
        if self.settings.container_data(decl.name).skipped:
            return None
        logger.debug("translating %s %s", decl.kind, decl.name)
        diagnostics: list[Diagnostic] = []
        candidates: list[Method] = []
        for method_decl in decl.methods:
            built = self.translate_method(decl.name, method_decl)
            diagnostics.extend(built.diagnostics)
            if built.value is not None:
                candidates.append(built.value)
        for property_decl in decl.properties:
            built_accessors = self.translate_property(decl.name, property_decl)
            diagnostics.extend(built_accessors.diagnostics)
            if built_accessors.value is not None:
                candidates.extend(m for m in built_accessors.value if m is not None)

        methods: dict[tuple[bool, str], Method] = {}
        for method in candidates:
            if method.id() in methods:
                diagnostics.append(
                    Diagnostic.warning(
                        method.fn_name, "duplicate declaration ignored", container=decl.name
                    )
                )
                continue
            methods[method.id()] = method

        unique = apply_related_result_type(methods.values())
        bindings = ContainerBindings(
            name=decl.name,
            kind=decl.kind,
            superclass=decl.superclass,
            methods=unique,
            designated_initializers=tuple(m.fn_name for m in unique if m.is_designated_initializer),
            diagnostics=tuple(diagnostics),
        )
        log = DiagnosticLog(bindings.diagnostics)
        log.emit(logger)
        self.diagnostics.extend(log)
        return bindings

    def translate(self, decls: Iterable[ContainerDecl]) -> dict[str, ContainerBindings]:
        """Translate every container, then re-emit covariant methods on subclasses."""
        translated = {
            decl.name: bindings
            for decl in decls
            if (bindings := self.translate_container(decl)) is not None
        }
        return inherit_covariant_methods(translated)


def _ancestors(
    name: str, bindings: Mapping[str, ContainerBindings]
) -> Iterable[ContainerBindings]:
    seen = {name}
    current = bindings[name].superclass
    while current is not None and current in bindings and current not in seen:
        seen.add(current)
        yield bindings[current]
        current = bindings[current].superclass


def inherit_covariant_methods(
    bindings: Mapping[str, ContainerBindings],
) -> dict[str, ContainerBindings]:
    """Re-emit each ancestor's covariant methods on every class below it.

    A class's own declarations win over inherited ones, and the nearest
    ancestor wins over more distant ones. Recomputed from scratch on every
    call, so running it twice changes nothing.
    """
    result: dict[str, ContainerBindings] = {}
    for name, container in bindings.items():
        if container.kind is not ContainerKind.CLASS:
            result[name] = container
            continue
        seen = {method.id() for method in container.methods}
        inherited: list[Method] = []
        for ancestor in _ancestors(name, bindings):
            for method in ancestor.methods:
                if method.emit_on_subclasses() and method.id() not in seen:
                    seen.add(method.id())
                    inherited.append(method)
        result[name] = replace(container, inherited=tuple(inherited))
    return result


def translate(
    decls: Iterable[ContainerDecl],
    *,
    resolver: TypeResolver | None = None,
    settings: BindWeaverSettings | None = None,
    configure_logging: bool = True,
) -> dict[str, ContainerBindings]:
    """Translate `decls` with a fresh `Translator`.

    Unless `configure_logging` is false, the package logger is set up from
    `settings.logging` first, so diagnostics reach the configured handler.
    """
    translator = Translator(resolver, settings)
    if configure_logging:
        setup_logger_from_settings(translator.settings.logging)
    return translator.translate(decls)


__all__ = ("ContainerBindings", "Translator", "inherit_covariant_methods", "translate")
