# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Global pytest configuration and fixtures for BindWeaver tests."""

import logging
import os

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from bindweaver.config.settings import BindWeaverSettings, MethodData, reset_settings
from bindweaver.semantic.declarations import ArgumentDecl, MethodDecl, PropertyDecl
from bindweaver.semantic.ty import SimpleTypeResolver


@pytest.fixture(autouse=True)
def isolated_test_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep stray config files, environment variables and logger setup out of every test."""
    monkeypatch.chdir(tmp_path)
    for name in [env for env in os.environ if env.startswith("BINDWEAVER_")]:
        monkeypatch.delenv(name)
    logger = logging.getLogger("bindweaver")
    handlers, level = list(logger.handlers), logger.level
    reset_settings()
    yield
    reset_settings()
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def resolver() -> SimpleTypeResolver:
    return SimpleTypeResolver()


@pytest.fixture
def settings() -> BindWeaverSettings:
    return BindWeaverSettings()


@pytest.fixture
def default_data() -> MethodData:
    return MethodData()


def method_decl(
    selector: str,
    result_type: str = "void",
    *arguments: tuple[str, str],
    attributes: tuple[Any, ...] = (),
    **kwargs: Any,
) -> MethodDecl:
    """Build a `MethodDecl` from `(name, type)` argument pairs."""
    return MethodDecl(
        selector=selector,
        result_type=result_type,
        arguments=tuple(ArgumentDecl(name=name, type=ty) for name, ty in arguments),
        attributes=attributes,
        **kwargs,
    )


def property_decl(name: str, type_: str, **kwargs: Any) -> PropertyDecl:
    return PropertyDecl(name=name, type=type_, **kwargs)
