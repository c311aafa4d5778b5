# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Semantic analysis of Objective-C methods and properties."""

from bindweaver.semantic.declarations import (
    ArgumentDecl,
    Availability,
    ContainerDecl,
    ContainerKind,
    DeclAttribute,
    DeclAttributeKind,
    MethodDecl,
    ObjCQualifiers,
    PropertyAttributes,
    PropertyDecl,
)
from bindweaver.semantic.formatter import format_container, format_method
from bindweaver.semantic.memory import MemoryManagement, MemoryManagementFold
from bindweaver.semantic.method import Method, PartialMethod, apply_related_result_type
from bindweaver.semantic.property import PartialProperty
from bindweaver.semantic.selectors import (
    RetainSemantics,
    SelectorFamily,
    in_selector_family,
    retain_semantics_for,
)
from bindweaver.semantic.translator import (
    ContainerBindings,
    Translator,
    inherit_covariant_methods,
    translate,
)
from bindweaver.semantic.ty import (
    MethodArgumentQualifier,
    ResolvedType,
    SimpleTypeResolver,
    Ty,
    TypeResolver,
)


__all__ = (
    "ArgumentDecl",
    "Availability",
    "ContainerBindings",
    "ContainerDecl",
    "ContainerKind",
    "DeclAttribute",
    "DeclAttributeKind",
    "MemoryManagement",
    "MemoryManagementFold",
    "Method",
    "MethodArgumentQualifier",
    "MethodDecl",
    "ObjCQualifiers",
    "PartialMethod",
    "PartialProperty",
    "PropertyAttributes",
    "PropertyDecl",
    "ResolvedType",
    "RetainSemantics",
    "SelectorFamily",
    "SimpleTypeResolver",
    "Translator",
    "Ty",
    "TypeResolver",
    "apply_related_result_type",
    "format_container",
    "format_method",
    "in_selector_family",
    "inherit_covariant_methods",
    "retain_semantics_for",
    "translate",
)
