# DataLab Engine - Column Type Inference
# Shared cell predicates (missing / numeric / date-like) and column typing
# Every agent operation classifies values through this module

from __future__ import annotations

import math
import re
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Sequence, Union

import pandas as pd

from datalab.core.config import EngineSettings, get_settings

Number = Union[int, float]

_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_INFINITIES = {"Infinity": math.inf, "+Infinity": math.inf, "-Infinity": -math.inf}
_RADIX_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}
_RELATIVE_DATE_RE = re.compile(r"^(now|today|yesterday|tomorrow|\d+(st|nd|rd|th))$", re.IGNORECASE)


# ============================================================================
# Enums
# ============================================================================

class ColumnType(str, Enum):
    """Inferred column type."""
    NUMERIC = "numeric"
    DATE = "date"
    TEXT = "text"
    EMPTY = "empty"


# ============================================================================
# Cell Predicates
# ============================================================================

def is_missing(value: Any) -> bool:
    """None, empty string, or NaN (NaN only arrives through DataFrame interop)."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, float):
        return math.isnan(value)
    return False


def _parse_numeric_text(text: str) -> Optional[Number]:
    s = text.strip()
    if not s:
        return None
    if s in _INFINITIES:
        return _INFINITIES[s]
    if "_" in s:
        return None
    radix = _RADIX_PREFIXES.get(s[:2].lower())
    if radix is not None:
        try:
            return int(s[2:], radix)
        except ValueError:
            return None
    if not _DECIMAL_RE.match(s):
        return None
    return float(s)


def to_number(value: Any) -> Optional[Number]:
    """
    Numeric reading of a cell, or None when the cell is not a number.

    Follows ``Number(value)`` conversion rules: booleans read as 0/1,
    numbers pass through, strings are trimmed and parsed as decimal (or
    ``0x``/``0o``/``0b`` prefixed) literals, ``"Infinity"`` is accepted and
    NaN never is. Missing cells are never numeric.
    """
    if is_missing(value):
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        return _parse_numeric_text(value)
    return None


def to_finite_number(value: Any) -> Optional[Number]:
    """As :func:`to_number` but rejects infinities."""
    number = to_number(value)
    if number is None or math.isinf(number):
        return None
    return number


def _date_candidate(value: Any) -> Optional[str]:
    if is_missing(value) or isinstance(value, bool):
        return None
    text = js_string(value).strip()
    if not text or _RELATIVE_DATE_RE.match(text):
        return None
    return text


def date_like_mask(values: Sequence[Any]) -> list[bool]:
    """
    Date reading for a batch of cells, parsed in one pandas call.

    Relative keywords (``now``, ``today``, ``yesterday``, ``tomorrow``) and
    bare ordinals such as ``1st`` are not dates. Unparseable strings read as
    False, never raise.
    """
    candidates = [_date_candidate(v) for v in values]
    texts = [c for c in candidates if c is not None]
    if not texts:
        return [False] * len(candidates)

    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        parsed = pd.to_datetime(
            pd.Series(texts, dtype=object),
            errors="coerce",
            format="mixed",
            utc=True,
        )

    flags = iter(parsed.notna().tolist())
    return [next(flags) if c is not None else False for c in candidates]


def js_string(value: Any) -> str:
    """
    Canonical string form of a cell.

    Used for row keys and frequency maps so that ``1`` and ``1.0`` read the
    same and booleans print lower-case.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)


# ============================================================================
# Column Helpers
# ============================================================================

def column_values(rows: Iterable[dict[str, Any]], column: str) -> list[Any]:
    """Non-missing values of a column in row order."""
    return [row.get(column) for row in rows if not is_missing(row.get(column))]


@dataclass
class ColumnProfile:
    """Non-missing values of a column and how they read."""
    values: list[Any]
    numeric_count: int
    date_flags: list[bool]  # empty when the column is fully numeric
    column_type: ColumnType

    @property
    def date_count(self) -> int:
        return sum(self.date_flags)


def _number_reader(finite: bool) -> Callable[[Any], Optional[Number]]:
    return to_finite_number if finite else to_number


def is_fully_numeric(values: Sequence[Any], finite: bool = False) -> bool:
    """Non-empty and every value reads as a number (finite only if asked)."""
    read = _number_reader(finite)
    return bool(values) and all(read(v) is not None for v in values)


def profile_values(
    values: list[Any],
    settings: Optional[EngineSettings] = None,
    finite: bool = False,
) -> ColumnProfile:
    """
    Classify already-collected non-missing values.

    Numeric takes priority over date: ``"2024"`` is a number first. With
    ``finite`` set, infinities do not count as numbers.
    """
    settings = settings or get_settings()
    if not values:
        return ColumnProfile(values=[], numeric_count=0, date_flags=[], column_type=ColumnType.EMPTY)

    read = _number_reader(finite)
    numeric_count = sum(1 for v in values if read(v) is not None)
    if numeric_count == len(values):
        return ColumnProfile(values, numeric_count, [], ColumnType.NUMERIC)

    date_flags = date_like_mask(values)
    if sum(date_flags) / len(values) > settings.date_fraction_threshold:
        column_type = ColumnType.DATE
    else:
        column_type = ColumnType.TEXT
    return ColumnProfile(values, numeric_count, date_flags, column_type)

