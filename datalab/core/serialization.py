# DataLab Engine - JSON Serialization
# Converts engine results into JSON-safe primitives

from __future__ import annotations

import math
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any
from uuid import UUID

import numpy as np
import pandas as pd


def to_jsonable(value: Any) -> Any:
    """
    Best-effort conversion to JSON-serializable primitives.

    Statistics computed with numpy come back as numpy scalars, and datasets
    built from DataFrames may still carry pandas timestamps; both are
    flattened here before a result leaves the engine.
    """

    if value is None:
        return None

    if isinstance(value, (str, bool, int)):
        return value

    if isinstance(value, float):
        return None if math.isnan(value) else value

    if isinstance(value, UUID):
        return str(value)

    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.isoformat()

    if isinstance(value, (datetime, date, time)):
        return value.isoformat()

    if isinstance(value, Decimal):
        return float(value)

    if isinstance(value, np.generic):
        return to_jsonable(value.item())

    if isinstance(value, np.ndarray):
        return [to_jsonable(v) for v in value.tolist()]

    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}

    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in value]

    # Fallback: preserve the value as a string rather than failing the caller's encoder.
    return str(value)
