# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Logging configuration settings for BindWeaver."""

from __future__ import annotations

import logging

from typing import Annotated, Any, Literal, NotRequired, TypedDict

from pydantic import Field

from bindweaver.core.types import BasedModel


# ===========================================================================
# *  TypedDict classes for Python Stdlib Logging Configuration (`dictConfig``)
# ===========================================================================


class FormattersDict(TypedDict, total=False):
    """A formatter entry for `logging.config.dictConfig`.

    [See the Python documentation for more details](https://docs.python.org/3/library/logging.html#logging.Formatter).
    """

    format: NotRequired[str]
    datefmt: NotRequired[str]
    style: NotRequired[str]


class HandlersDict(TypedDict, total=False):
    """A handler entry for `logging.config.dictConfig`."""

    class_name: NotRequired[Annotated[str, Field(serialization_alias="class")]]
    level: NotRequired[int | str]
    formatter: NotRequired[str]


class LoggersDict(TypedDict, total=False):
    """A logger entry for `logging.config.dictConfig`."""

    level: NotRequired[int | str]
    propagate: NotRequired[bool]
    handlers: NotRequired[list[str]]


class LoggingConfigDict(TypedDict, total=False):
    """The top-level `dictConfig` schema."""

    version: Literal[1]
    disable_existing_loggers: NotRequired[bool]
    formatters: NotRequired[dict[str, FormattersDict]]
    handlers: NotRequired[dict[str, HandlersDict]]
    loggers: NotRequired[dict[str, LoggersDict]]
    root: NotRequired[LoggersDict]


type LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BasedModel):
    """How BindWeaver reports diagnostics."""

    level: Annotated[
        LogLevelName, Field(description="Minimum level forwarded to the handler.")
    ] = "WARNING"
    use_rich: Annotated[
        bool, Field(description="Render log records with `rich.logging.RichHandler`.")
    ] = True
    rich_options: Annotated[
        dict[str, Any],
        Field(default_factory=dict, description="Extra keyword arguments for `RichHandler`."),
    ]
    dict_config: Annotated[
        LoggingConfigDict | None,
        Field(description="A full `dictConfig` mapping; applied before the rich handler."),
    ] = None

    @property
    def level_number(self) -> int:
        return logging.getLevelNamesMapping()[self.level]


__all__ = (
    "FormattersDict",
    "HandlersDict",
    "LogLevelName",
    "LoggersDict",
    "LoggingConfigDict",
    "LoggingSettings",
)
