"""Validation of request parameters for the holdings endpoints."""

from enum import StrEnum
from typing import Any

from django.core.exceptions import ValidationError

import structlog

from holdings.domain.money import ValueIn
from holdings.services.valuation.types import GroupBy, GroupingMode, SortDirection, ViewMode

logger = structlog.get_logger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class InvalidInputError(ValidationError):
    """Raised when input validation fails."""

    pass


def _validate_choice(
    value: str | None, choices: type[StrEnum], param_name: str, default: StrEnum
) -> Any:
    """Match ``value`` case-insensitively against the members of ``choices``."""
    if value is None or value == "":
        return default

    for member in choices:
        if member.value.lower() == value.lower():
            return member

    valid = [member.value for member in choices]
    logger.warning(f"invalid_{param_name}", value=value, valid_values=valid)
    raise InvalidInputError(f"Invalid {param_name}: {value}. Must be one of: {', '.join(valid)}")


def validate_view_mode(view_mode: str | None, default: ViewMode = ViewMode.SUMMARY) -> ViewMode:
    """
    Validate view mode parameter.

    Raises:
        InvalidInputError: If view mode is not summary, table, cards or heatmap
    """
    return _validate_choice(view_mode, ViewMode, "view_mode", default)


def validate_group_by(group_by: str | None, default: GroupBy = GroupBy.ASSET_CLASS) -> GroupBy:
    return _validate_choice(group_by, GroupBy, "group_by", default)


def validate_value_in(value_in: str | None, default: ValueIn = ValueIn.PORTFOLIO) -> ValueIn:
    return _validate_choice(value_in, ValueIn, "value_in", default)


def validate_grouping_mode(
    grouping_mode: str | None, default: GroupingMode | None = None
) -> GroupingMode | None:
    """Allocation grouping; None when absent so callers can derive it from group-by."""
    if grouping_mode is None or grouping_mode == "":
        return default
    return _validate_choice(grouping_mode, GroupingMode, "grouping_mode", GroupingMode.CATEGORY)


def validate_sort_direction(
    direction: str | None, default: SortDirection = SortDirection.ASC
) -> SortDirection:
    return _validate_choice(direction, SortDirection, "sort_direction", default)


def validate_hide_empty(value: str | None, default: bool = True) -> bool:
    """
    Validate a boolean query flag.

    Raises:
        InvalidInputError: If the value is not a recognised true/false spelling
    """
    if value is None or value == "":
        return default

    flag = value.lower()
    if flag in _TRUE_VALUES:
        return True
    if flag in _FALSE_VALUES:
        return False

    logger.warning("invalid_hide_empty", value=value)
    raise InvalidInputError(f"Invalid hide_empty: {value}. Must be true or false")
