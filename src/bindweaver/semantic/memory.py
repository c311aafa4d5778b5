# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Memory-management contracts and the attribute fold that infers them.

A declaration's contract is inferred from the semantic attributes clang
attaches to it, then checked against what its selector family promises.
The two must agree, because downstream code picks a retain/release strategy
from the selector alone.
"""

from __future__ import annotations

import logging

from bindweaver.core.types import BaseEnum
from bindweaver.exceptions import ConsistencyError
from bindweaver.semantic.selectors import SelectorFamily, selector_family


logger = logging.getLogger(__name__)


class MemoryManagement(BaseEnum):
    """Ownership contract of a declaration's result."""

    INIT = "init"
    """Consumes the receiver and returns a retained object with the same identity."""
    RETURNS_RETAINED = "returns_retained"
    """The caller receives a +1 reference."""
    RETURNS_INNER_POINTER = "returns_inner_pointer"
    """The result is only valid while the receiver is alive."""
    NORMAL = "normal"
    """An ordinary autoreleased return."""

    def verify_sel(self, selector: str) -> None:
        """Verify that the selector family and this contract agree.

        Raises:
            ConsistencyError: if the selector promises a different contract.
        """
        match selector_family(selector):
            case SelectorFamily.INIT:
                expected: tuple[MemoryManagement, ...] = (MemoryManagement.INIT,)
            case SelectorFamily():
                expected = (MemoryManagement.RETURNS_RETAINED,)
            case None:
                expected = (MemoryManagement.NORMAL, MemoryManagement.RETURNS_INNER_POINTER)
        if self not in expected:
            raise ConsistencyError(
                f"memory management {self.value} did not match selector {selector}",
                selector=selector,
                invariant="selector-family-mismatch",
                details={"expected": [state.value for state in expected]},
                suggestions=[
                    "Check the header for a missing NS_RETURNS_RETAINED or NS_CONSUMES_SELF",
                    "Skip the declaration in the configuration if it breaks convention on purpose",
                ],
            )


class MemoryManagementFold:
    """Accumulates memory-management attributes of one declaration.

    Each transition method corresponds to one attribute. Transitions may be
    applied in any order; `finish` resolves them in a fixed order:

    1. start at `NORMAL`;
    2. returns-retained moves to `RETURNS_RETAINED`;
    3. returns-inner-pointer moves to `RETURNS_INNER_POINTER`;
    4. consumes-self promotes `RETURNS_RETAINED` to `INIT`.

    Leaving `NORMAL` twice is an attribute conflict.
    """

    def __init__(self, selector: str) -> None:
        self.selector = selector
        self.state = MemoryManagement.NORMAL
        self.consumes = False
        self.designated = False

    def _fault(self, message: str, invariant: str) -> ConsistencyError:
        return ConsistencyError(message, selector=self.selector, invariant=invariant)

    def _transition(self, state: MemoryManagement, attribute: str) -> None:
        if self.state is not MemoryManagement.NORMAL:
            raise self._fault(
                f"got unexpected {attribute} on a declaration already marked {self.state.value}",
                "attribute-conflict",
            )
        self.state = state

    def returns_retained(self) -> None:
        self._transition(MemoryManagement.RETURNS_RETAINED, "NSReturnsRetained")

    def returns_inner_pointer(self) -> None:
        self._transition(MemoryManagement.RETURNS_INNER_POINTER, "ObjCReturnsInnerPointer")

    def consumes_self(self) -> None:
        self.consumes = True

    def designated_initializer(self) -> None:
        if self.designated:
            raise self._fault(
                "encountered ObjCDesignatedInitializer twice", "repeated-designated-initializer"
            )
        self.designated = True

    def returns_autoreleased(self) -> None:
        raise self._fault(
            "found NSReturnsAutoreleased, which requires manual handling", "unsupported-attribute"
        )

    def returns_not_retained(self) -> None:
        raise self._fault(
            "found NSReturnsNotRetained, which is not yet supported", "unsupported-attribute"
        )

    def finish(self) -> MemoryManagement:
        """Resolve the accumulated attributes into a single contract."""
        if self.consumes:
            if self.state is not MemoryManagement.RETURNS_RETAINED:
                raise self._fault(
                    "got NSConsumesSelf without NSReturnsRetained", "consumes-self-without-retained"
                )
            self.state = MemoryManagement.INIT
            self.consumes = False
        logger.debug("%s resolved to %s", self.selector, self.state.value)
        return self.state


__all__ = ("MemoryManagement", "MemoryManagementFold")
