# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for diagnostics and the diagnostic log."""

import logging

import pytest

from bindweaver.core.diagnostics import Built, Diagnostic, DiagnosticLog, Severity


pytestmark = [pytest.mark.unit]


@pytest.fixture
def log():
    return DiagnosticLog([
        Diagnostic.warning("stringWithFormat", "can't handle variadic method"),
        Diagnostic.error("awakeFromNib", "unknown attribute", kind="ib_outlet"),
        Diagnostic.warning("awakeFromNib", "unknown macro", macro="MY_MACRO"),
    ])


class TestDiagnostic:
    """Tests for individual diagnostics."""

    def test_constructors(self):
        diagnostic = Diagnostic.warning("reload", "unknown macro", macro="FOO")
        assert diagnostic.severity is Severity.WARNING
        assert diagnostic.declaration == "reload"
        assert diagnostic.details == {"macro": "FOO"}
        assert Diagnostic.error("reload", "bad").severity is Severity.ERROR

    def test_str(self):
        assert str(Diagnostic.error("copy", "invalid")) == "[error] copy: invalid"

    def test_dump(self):
        diagnostic = Diagnostic.warning("reload", "unknown macro", macro="FOO")
        assert diagnostic.dump_python(mode="json") == {
            "severity": "warning",
            "message": "unknown macro",
            "declaration": "reload",
            "details": {"macro": "FOO"},
        }

    def test_severity_log_level(self):
        assert Severity.WARNING.log_level == logging.WARNING
        assert Severity.ERROR.log_level == logging.ERROR


class TestBuilt:
    """Tests for builder results."""

    def test_dropped(self):
        assert Built(None).dropped
        assert not Built(1).dropped
        assert Built(None).diagnostics == ()


class TestDiagnosticLog:
    """Tests for collecting and forwarding diagnostics."""

    def test_filters(self, log):
        assert len(log) == 3
        assert len(log.warnings) == 2
        assert [d.message for d in log.errors] == ["unknown attribute"]
        assert len(log.for_declaration("awakeFromNib")) == 2
        assert log.for_declaration("missing") == ()

    def test_append_and_extend(self, log):
        log.append(Diagnostic.warning("a", "b"))
        log.extend([Diagnostic.error("c", "d"), Diagnostic.error("e", "f")])
        assert len(log) == 6
        assert [d.declaration for d in log][-3:] == ["a", "c", "e"]

    def test_emit(self, log, caplog):
        logger = logging.getLogger("bindweaver.test")
        with caplog.at_level(logging.WARNING, logger="bindweaver.test"):
            log.emit(logger)
        assert [r.levelno for r in caplog.records] == [
            logging.WARNING,
            logging.ERROR,
            logging.WARNING,
        ]
        record = caplog.records[1]
        assert record.getMessage() == "awakeFromNib: unknown attribute"
        assert record.declaration == "awakeFromNib"
        assert record.details == {"kind": "ib_outlet"}
