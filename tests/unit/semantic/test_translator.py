# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for translating containers and class hierarchies."""

import logging

import pytest

from rich.logging import RichHandler

from bindweaver.config.settings import BindWeaverSettings
from bindweaver.core.diagnostics import Severity
from bindweaver.exceptions import ConsistencyError
from bindweaver.semantic.declarations import ContainerDecl, ContainerKind, PropertyAttributes
from bindweaver.semantic.formatter import format_container
from bindweaver.semantic.translator import Translator, inherit_covariant_methods, translate
from tests.conftest import method_decl, property_decl


pytestmark = [pytest.mark.unit]

INIT_ATTRIBUTES = ("consumes_self", "returns_retained")


def hierarchy():
    return [
        ContainerDecl(
            name="NSObject",
            methods=(
                method_decl("init", "instancetype", attributes=INIT_ATTRIBUTES),
                method_decl("new", "instancetype", is_class=True, attributes=("returns_retained",)),
                method_decl(
                    "allocWithZone:",
                    "instancetype",
                    ("zone", "NSZone *"),
                    is_class=True,
                    attributes=("returns_retained",),
                ),
                method_decl("description", "NSString *"),
            ),
        ),
        ContainerDecl(
            name="NSView",
            superclass="NSObject",
            methods=(
                method_decl(
                    "initWithFrame:",
                    "instancetype",
                    ("frame", "NSRect"),
                    attributes=("designated_initializer", *INIT_ATTRIBUTES),
                ),
                method_decl("layout"),
            ),
        ),
        ContainerDecl(
            name="NSControl",
            superclass="NSView",
            methods=(
                method_decl(
                    "initWithFrame:",
                    "instancetype",
                    ("frame", "NSRect"),
                    attributes=INIT_ATTRIBUTES,
                ),
            ),
        ),
        ContainerDecl(name="NSButton", superclass="NSControl"),
    ]


class TestTranslateContainer:
    """Tests for single-container translation."""

    def test_methods_and_properties(self, settings):
        decl = ContainerDecl(
            name="NSThing",
            methods=(method_decl("reload"),),
            properties=(property_decl("title", "NSString *"),),
        )
        bindings = Translator(settings=settings).translate_container(decl)
        assert [m.selector for m in bindings.methods] == ["reload", "title", "setTitle:"]
        assert bindings.find("setTitle:") is not None
        assert bindings.find("title", is_class=True) is None

    def test_duplicates_keep_first(self, settings, caplog):
        """Test that a later declaration with the same id is dropped with a warning."""
        decl = ContainerDecl(
            name="NSThing",
            methods=(method_decl("count", "NSUInteger"), method_decl("count", "NSInteger")),
            properties=(
                property_decl(
                    "count", "int", property_attributes=PropertyAttributes(readonly=True)
                ),
            ),
        )
        translator = Translator(settings=settings)
        with caplog.at_level(logging.WARNING, logger="bindweaver"):
            bindings = translator.translate_container(decl)
        [method] = bindings.methods
        assert method.result_type.render() == "NSUInteger"
        duplicates = [
            d for d in bindings.diagnostics if d.message == "duplicate declaration ignored"
        ]
        assert len(duplicates) == 2
        assert all(d.severity is Severity.WARNING for d in duplicates)
        assert len(translator.diagnostics.warnings) == 2
        assert "duplicate declaration ignored" in caplog.text

    def test_class_and_instance_methods_are_distinct(self, settings):
        decl = ContainerDecl(
            name="NSThing",
            methods=(
                method_decl("description", "NSString *"),
                method_decl("description", "NSString *", is_class=True),
            ),
        )
        bindings = Translator(settings=settings).translate_container(decl)
        assert len(bindings.methods) == 2

    def test_configuration_overrides(self):
        settings = BindWeaverSettings(
            containers={
                "NSThing": {
                    "default": {"unsafe": False},
                    "methods": {
                        "reload": {"skipped": True},
                        "setTitle:": {"mutating": True, "unsafe": True},
                    },
                }
            }
        )
        decl = ContainerDecl(
            name="NSThing",
            methods=(method_decl("reload"), method_decl("layout")),
            properties=(property_decl("title", "NSString *"),),
        )
        bindings = Translator(settings=settings).translate_container(decl)
        assert bindings.find("reload") is None
        assert bindings.find("layout").safe
        assert bindings.find("title").safe
        setter = bindings.find("setTitle:")
        assert setter.mutating and not setter.safe

    def test_skipped_container(self):
        settings = BindWeaverSettings(containers={"NSThing": {"skipped": True}})
        decl = ContainerDecl(name="NSThing", methods=(method_decl("reload"),))
        assert Translator(settings=settings).translate_container(decl) is None
        assert translate([decl], settings=settings) == {}

    def test_fail_fast(self, settings):
        decl = ContainerDecl(name="NSThing", methods=(method_decl("copy", "id"),))
        with pytest.raises(ConsistencyError):
            Translator(settings=settings).translate_container(decl)

    def test_consistency_fault_recorded_when_not_failing_fast(self):
        """Test that the faulty declaration is dropped and the rest survives."""
        settings = BindWeaverSettings(fail_fast=False)
        decl = ContainerDecl(
            name="NSThing",
            methods=(method_decl("copy", "id"), method_decl("reload")),
        )
        bindings = Translator(settings=settings).translate_container(decl)
        assert [m.selector for m in bindings.methods] == ["reload"]
        [error] = bindings.diagnostics
        assert error.severity is Severity.ERROR
        assert error.declaration == "copy"
        assert error.details == {"selector": "copy", "invariant": "selector-family-mismatch"}

    def test_designated_initializers(self, settings):
        bindings = translate(hierarchy(), settings=settings)
        assert bindings["NSView"].designated_initializers == ("initWithFrame",)
        assert bindings["NSControl"].designated_initializers == ()

    def test_related_result_type_applied(self, settings):
        bindings = translate(hierarchy(), settings=settings)
        view = bindings["NSView"]
        assert view.find("initWithFrame:").generic_over_subclass
        assert not view.find("layout").generic_over_subclass
        root = bindings["NSObject"]
        assert root.find("init").generic_over_subclass
        assert root.find("allocWithZone:", is_class=True).generic_over_subclass
        assert not root.find("new", is_class=True).generic_over_subclass

    def test_covariant_results_are_pinned_per_class(self, settings):
        """Test that untagged covariant results name the class they are emitted on."""
        decls = [
            ContainerDecl(
                name="NSWorkspace",
                methods=(
                    method_decl("sharedWorkspace", "instancetype", is_class=True),
                    method_decl("init", "instancetype", attributes=INIT_ATTRIBUTES),
                ),
            ),
            ContainerDecl(name="MyWorkspace", superclass="NSWorkspace"),
        ]
        bindings = translate(decls, settings=settings)
        base = format_container(bindings["NSWorkspace"])
        assert "() -> Id<NSWorkspace>;" in base
        assert "(this: Option<Allocated<Self>>) -> Id<Self>;" in base
        subclass = format_container(bindings["MyWorkspace"])
        assert "() -> Id<MyWorkspace>;" in subclass
        assert "Id<NSWorkspace>" not in subclass

    def test_translate_configures_logging(self):
        settings = BindWeaverSettings(logging={"level": "ERROR", "use_rich": True})
        translate([ContainerDecl(name="NSThing")], settings=settings)
        logger = logging.getLogger("bindweaver")
        assert logger.level == logging.ERROR
        assert [type(h) for h in logger.handlers] == [RichHandler]

    def test_translate_leaves_logging_alone(self, settings):
        logger = logging.getLogger("bindweaver")
        before = list(logger.handlers)
        translate([ContainerDecl(name="NSThing")], settings=settings, configure_logging=False)
        assert logger.handlers == before

    def test_required_types(self, settings):
        decl = ContainerDecl(
            name="NSThing",
            methods=(
                method_decl(
                    "writeToURL:error:", "BOOL", ("url", "NSURL *"), ("error", "NSError **")
                ),
            ),
            properties=(property_decl("title", "NSString *"),),
        )
        bindings = Translator(settings=settings).translate_container(decl)
        assert bindings.required_types() == {"NSURL", "NSError", "NSString"}


class TestHierarchy:
    """Tests for re-emitting covariant methods on subclasses."""

    def test_inherited_methods(self, settings):
        bindings = translate(hierarchy(), settings=settings)
        inherited = {m.selector: m for m in bindings["NSButton"].inherited}
        assert set(inherited) == {"initWithFrame:", "allocWithZone:"}
        # nearest ancestor wins
        assert not inherited["initWithFrame:"].is_designated_initializer

    def test_own_declarations_win(self, settings):
        bindings = translate(hierarchy(), settings=settings)
        control = {m.selector for m in bindings["NSControl"].inherited}
        assert control == {"allocWithZone:"}
        assert bindings["NSObject"].inherited == ()

    def test_exempt_methods_are_not_inherited(self, settings):
        bindings = translate(hierarchy(), settings=settings)
        selectors = {m.selector for m in bindings["NSView"].inherited}
        assert "new" not in selectors
        assert "init" not in selectors
        assert "description" not in selectors

    def test_idempotent(self, settings):
        bindings = translate(hierarchy(), settings=settings)
        assert inherit_covariant_methods(bindings) == bindings

    def test_protocols_are_left_alone(self, settings):
        decls = [
            *hierarchy(),
            ContainerDecl(name="NSCoding", kind=ContainerKind.PROTOCOL, superclass="NSObject"),
        ]
        assert translate(decls, settings=settings)["NSCoding"].inherited == ()

    def test_cycles_terminate(self, settings):
        decls = [
            ContainerDecl(
                name="A",
                superclass="B",
                methods=(method_decl("array", "instancetype", is_class=True),),
            ),
            ContainerDecl(
                name="B",
                superclass="A",
                methods=(method_decl("set", "instancetype", is_class=True),),
            ),
        ]
        bindings = translate(decls, settings=settings)
        assert [m.selector for m in bindings["A"].inherited] == ["set"]
        assert [m.selector for m in bindings["B"].inherited] == ["array"]

    def test_missing_superclass(self, settings):
        decl = ContainerDecl(name="NSThing", superclass="NSUnknown")
        assert translate([decl], settings=settings)["NSThing"].inherited == ()
