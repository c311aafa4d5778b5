# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for memory-management contracts and the attribute fold."""

import pytest

from bindweaver.exceptions import ConsistencyError
from bindweaver.semantic.memory import MemoryManagement, MemoryManagementFold


pytestmark = [pytest.mark.unit]


class TestVerifySel:
    """Tests for the selector family check."""

    @pytest.mark.parametrize(
        "selector,state",
        [
            ("init", MemoryManagement.INIT),
            ("initWithCoder:", MemoryManagement.INIT),
            ("new", MemoryManagement.RETURNS_RETAINED),
            ("newWithName:", MemoryManagement.RETURNS_RETAINED),
            ("alloc", MemoryManagement.RETURNS_RETAINED),
            ("allocWithZone:", MemoryManagement.RETURNS_RETAINED),
            ("copy", MemoryManagement.RETURNS_RETAINED),
            ("mutableCopyWithZone:", MemoryManagement.RETURNS_RETAINED),
            ("description", MemoryManagement.NORMAL),
            ("initialize", MemoryManagement.NORMAL),
            ("copyright", MemoryManagement.NORMAL),
            ("bytes", MemoryManagement.RETURNS_INNER_POINTER),
        ],
    )
    def test_accepts_matching_contract(self, selector: str, state: MemoryManagement):
        """Test that conventional pairs pass."""
        state.verify_sel(selector)

    @pytest.mark.parametrize(
        "selector,state",
        [
            ("init", MemoryManagement.NORMAL),
            ("init", MemoryManagement.RETURNS_RETAINED),
            ("initWithFrame:", MemoryManagement.RETURNS_INNER_POINTER),
            ("new", MemoryManagement.NORMAL),
            ("new", MemoryManagement.INIT),
            ("copy", MemoryManagement.NORMAL),
            ("mutableCopy", MemoryManagement.RETURNS_INNER_POINTER),
            ("initialize", MemoryManagement.INIT),
            ("description", MemoryManagement.RETURNS_RETAINED),
        ],
    )
    def test_rejects_mismatch(self, selector: str, state: MemoryManagement):
        """Test that a disagreeing contract is a consistency fault naming the selector."""
        with pytest.raises(ConsistencyError) as exc_info:
            state.verify_sel(selector)
        assert exc_info.value.selector == selector
        assert exc_info.value.invariant == "selector-family-mismatch"
        assert selector in str(exc_info.value)


class TestMemoryManagementFold:
    """Tests for folding attributes into a contract."""

    def test_no_attributes_is_normal(self):
        """Test the starting state."""
        assert MemoryManagementFold("description").finish() is MemoryManagement.NORMAL

    def test_returns_retained(self):
        fold = MemoryManagementFold("copy")
        fold.returns_retained()
        assert fold.finish() is MemoryManagement.RETURNS_RETAINED

    def test_returns_inner_pointer(self):
        fold = MemoryManagementFold("bytes")
        fold.returns_inner_pointer()
        assert fold.finish() is MemoryManagement.RETURNS_INNER_POINTER

    @pytest.mark.parametrize("consumes_first", [True, False])
    def test_consumes_self_with_retained_is_init(self, consumes_first: bool):
        """Test that attribute order does not matter for init promotion."""
        fold = MemoryManagementFold("initWithName:")
        if consumes_first:
            fold.consumes_self()
            fold.returns_retained()
        else:
            fold.returns_retained()
            fold.consumes_self()
        assert fold.finish() is MemoryManagement.INIT

    def test_finish_is_stable(self):
        """Test that finishing twice yields the same contract."""
        fold = MemoryManagementFold("init")
        fold.returns_retained()
        fold.consumes_self()
        assert fold.finish() is MemoryManagement.INIT
        assert fold.finish() is MemoryManagement.INIT

    def test_consumes_self_without_retained(self):
        """Test that consumes-self alone is fatal."""
        fold = MemoryManagementFold("init")
        fold.consumes_self()
        with pytest.raises(ConsistencyError) as exc_info:
            fold.finish()
        assert exc_info.value.invariant == "consumes-self-without-retained"

    def test_consumes_self_with_inner_pointer(self):
        fold = MemoryManagementFold("bytes")
        fold.returns_inner_pointer()
        fold.consumes_self()
        with pytest.raises(ConsistencyError, match="NSConsumesSelf"):
            fold.finish()

    @pytest.mark.parametrize(
        "first,second",
        [
            ("returns_retained", "returns_inner_pointer"),
            ("returns_inner_pointer", "returns_retained"),
            ("returns_retained", "returns_retained"),
            ("returns_inner_pointer", "returns_inner_pointer"),
        ],
    )
    def test_second_transition_conflicts(self, first: str, second: str):
        """Test that a declaration cannot leave the normal state twice."""
        fold = MemoryManagementFold("bytes")
        getattr(fold, first)()
        with pytest.raises(ConsistencyError) as exc_info:
            getattr(fold, second)()
        assert exc_info.value.invariant == "attribute-conflict"
        assert exc_info.value.selector == "bytes"

    def test_repeated_designated_initializer(self):
        fold = MemoryManagementFold("initWithFrame:")
        fold.designated_initializer()
        assert fold.designated
        with pytest.raises(ConsistencyError) as exc_info:
            fold.designated_initializer()
        assert exc_info.value.invariant == "repeated-designated-initializer"

    @pytest.mark.parametrize("transition", ["returns_autoreleased", "returns_not_retained"])
    def test_unsupported_attributes(self, transition: str):
        """Test that attributes needing manual handling are fatal immediately."""
        fold = MemoryManagementFold("object")
        with pytest.raises(ConsistencyError) as exc_info:
            getattr(fold, transition)()
        assert exc_info.value.invariant == "unsupported-attribute"
