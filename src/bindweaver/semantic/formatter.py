# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Render descriptors into binding syntax."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from bindweaver.semantic.declarations import ContainerKind
from bindweaver.semantic.selectors import handle_reserved, is_init


if TYPE_CHECKING:
    from bindweaver.semantic.declarations import Availability
    from bindweaver.semantic.method import Method
    from bindweaver.semantic.translator import ContainerBindings


INDENT = " " * 8


def _receiver(method: Method) -> str | None:
    if method.is_class:
        return None
    if is_init(method.selector):
        return "this: Option<Allocated<Self>>"
    return "&mut self" if method.mutating else "&self"


def _deprecated(availability: Availability) -> str | None:
    if not availability.is_deprecated:
        return None
    if availability.message:
        return f'#[deprecated = "{availability.message}"]'
    return "#[deprecated]"


def format_method(method: Method, owner: str | None = None) -> str:
    """Render one method as its attribute lines plus signature.

    `owner` is the class the binding is emitted on. A covariant result of a
    method that is not generic over subclasses is pinned to it.
    """
    lines: list[str] = []
    if deprecated := _deprecated(method.availability):
        lines.append(deprecated)
    if method.is_optional_protocol:
        lines.append("#[optional]")
    if method.must_use:
        lines.append("#[must_use]")

    error_trailing = "_" if method.result_type.is_error() else ""
    if method.result_type.is_id():
        lines.append(
            f"#[method_id(@__retain_semantics {method.retain_semantics.value} "
            f"{method.selector}{error_trailing})]"
        )
    else:
        lines.append(f"#[method({method.selector}{error_trailing})]")

    params = [
        *filter(None, (_receiver(method),)),
        *(f"{handle_reserved(name)}: {ty.render()}" for name, ty in method.arguments),
    ]
    result = method.result_type.render(None if method.generic_over_subclass else owner)
    unsafe = "" if method.safe else "unsafe "
    lines.append(
        f"pub {unsafe}fn {handle_reserved(method.fn_name)}({', '.join(params)})"
        f"{f' -> {result}' if result else ''};"
    )
    return "\n".join(f"{INDENT}{line}" for line in lines) + "\n"


def format_methods(methods: Iterable[Method], owner: str | None = None) -> str:
    return "\n".join(format_method(method, owner) for method in methods)


def format_container(bindings: ContainerBindings) -> str:
    """Render a container's methods, plus anything it re-emits from its superclasses."""
    methods = (*bindings.methods, *bindings.inherited)
    if bindings.kind is ContainerKind.PROTOCOL:
        header = f"    pub unsafe trait {bindings.name} {{"
        macro = "extern_protocol"
        body = format_methods(methods)
    else:
        header = f"    unsafe impl {bindings.name} {{"
        macro = "extern_methods"
        body = format_methods(methods, bindings.owner)
    return f"{macro}!(\n{header}\n{body}    }}\n);\n"


__all__ = ("format_container", "format_method", "format_methods")
