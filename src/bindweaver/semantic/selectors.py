# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Selector family classification.

Objective-C's memory-management conventions hang off the first word of a
selector: `alloc`, `new`, `init`, `copy` and `mutableCopy` methods hand the
caller ownership of their result. Deciding family membership is a pure
prefix match with a camel-case boundary rule:

- `init`, `init:`, `initWithCoder:` and `_initPrivate` are in the `init` family.
- `initialize` and `initiate` are not; the prefix is followed by a lowercase letter.
"""

from __future__ import annotations

from functools import cache
from types import MappingProxyType

from bindweaver.core.types import BaseEnum
from bindweaver.exceptions import InvariantError


class SelectorFamily(BaseEnum):
    """The selector families that imply an ownership transfer."""

    NEW = "new"
    ALLOC = "alloc"
    INIT = "init"
    COPY = "copy"
    MUTABLE_COPY = "mutableCopy"


class RetainSemantics(BaseEnum):
    """The canonical family tag rendered next to object-returning selectors."""

    NEW = "New"
    ALLOC = "Alloc"
    INIT = "Init"
    COPY_OR_MUT_COPY = "CopyOrMutCopy"
    OTHER = "Other"


_FAMILY_TAGS: MappingProxyType[SelectorFamily, RetainSemantics] = MappingProxyType({
    SelectorFamily.NEW: RetainSemantics.NEW,
    SelectorFamily.ALLOC: RetainSemantics.ALLOC,
    SelectorFamily.INIT: RetainSemantics.INIT,
    SelectorFamily.COPY: RetainSemantics.COPY_OR_MUT_COPY,
    SelectorFamily.MUTABLE_COPY: RetainSemantics.COPY_OR_MUT_COPY,
})

RESERVED_IDENTIFIERS: frozenset[str] = frozenset({"type", "trait", "abstract"})


def in_selector_family(selector: str, family: SelectorFamily | str) -> bool:
    """Check whether `selector` belongs to `family`.

    Leading underscores are ignored. The selector must start with the family
    word, and the character after it (if there is one) must not be a
    lowercase ASCII letter.
    """
    word = family.value if isinstance(family, SelectorFamily) else family
    stripped = selector.lstrip("_")
    if not stripped.startswith(word):
        return False
    rest = stripped[len(word) :]
    return not rest or not ("a" <= rest[0] <= "z")


@cache
def selector_families(selector: str) -> frozenset[SelectorFamily]:
    """Every family `selector` matches. At most one for well-formed selectors."""
    return frozenset(family for family in SelectorFamily if in_selector_family(selector, family))


def selector_family(selector: str) -> SelectorFamily | None:
    """The single family `selector` belongs to, or `None`."""
    match tuple(selector_families(selector)):
        case ():
            return None
        case (family,):
            return family
        case families:
            raise InvariantError(
                f"selector {selector!r} matches several selector families",
                details={"selector": selector, "families": sorted(f.value for f in families)},
            )


def retain_semantics_for(selector: str) -> RetainSemantics:
    """Derive the canonical retain-semantics tag for `selector`.

    `copy` and `mutableCopy` share one tag. A selector can never match two
    families given the boundary rule, so an overlap is an `InvariantError`.
    """
    family = selector_family(selector)
    return RetainSemantics.OTHER if family is None else _FAMILY_TAGS[family]


def is_init(selector: str) -> bool:
    return in_selector_family(selector, SelectorFamily.INIT)


def is_alloc(selector: str) -> bool:
    return in_selector_family(selector, SelectorFamily.ALLOC)


def is_new(selector: str) -> bool:
    return in_selector_family(selector, SelectorFamily.NEW)


def binding_name(selector: str) -> str:
    """Turn a selector into a binding name: `initWithFrame:style:` -> `initWithFrame_style`."""
    return selector.rstrip(":").replace(":", "_")


def handle_reserved(name: str) -> str:
    """Escape identifiers that collide with reserved words in the binding syntax."""
    return f"{name}_" if name in RESERVED_IDENTIFIERS else name


__all__ = (
    "RESERVED_IDENTIFIERS",
    "RetainSemantics",
    "SelectorFamily",
    "binding_name",
    "handle_reserved",
    "in_selector_family",
    "is_alloc",
    "is_init",
    "is_new",
    "retain_semantics_for",
    "selector_families",
    "selector_family",
)
