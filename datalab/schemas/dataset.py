# DataLab Engine - Dataset Schema
# Pydantic boundary model for the row/column exchange format

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any, Optional, Union

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from datalab.core.exceptions import ValidationException

CellValue = Union[None, bool, int, float, str]
Row = dict[str, CellValue]

_SCALAR_TYPES = (bool, int, float, str)


class Dataset(BaseModel):
    """
    An ordered sequence of rows plus an explicit ordered column list.

    Rows may lack some columns or carry extra keys; both are data-quality
    concerns reported by the validator, not rejected input. Absent keys read
    as ``None`` through :meth:`value`.
    """

    model_config = ConfigDict(extra="forbid")

    rows: list[dict[str, Any]] = Field(default_factory=list, description="Row mappings")
    columns: list[str] = Field(default_factory=list, description="Ordered column names")

    @field_validator("rows")
    @classmethod
    def validate_cells(cls, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Reject non-scalar cell values."""
        for index, row in enumerate(rows):
            for key, value in row.items():
                if value is not None and not isinstance(value, _SCALAR_TYPES):
                    raise ValueError(
                        f"Row {index + 1} column '{key}' holds unsupported "
                        f"{type(value).__name__} value"
                    )
        return rows

    @field_validator("columns")
    @classmethod
    def validate_columns(cls, columns: list[str]) -> list[str]:
        seen: set[str] = set()
        for column in columns:
            if column in seen:
                raise ValueError(f"Duplicate column name '{column}'")
            seen.add(column)
        return columns

    @model_validator(mode="after")
    def derive_columns(self) -> "Dataset":
        if not self.columns and self.rows:
            self.columns = list(self.rows[0].keys())
        return self

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_rows(
        cls,
        rows: Any,
        columns: Optional[Sequence[str]] = None,
    ) -> "Dataset":
        """
        Build a dataset from caller-supplied rows.

        When ``columns`` is omitted the column list is the keys of the first
        row. Rows are shallow-copied, so operators never touch caller data.

        Raises:
            ValidationException: rows is not a list of mappings, or a cell
                or column name is malformed.
        """
        if isinstance(rows, (str, bytes)) or not isinstance(rows, Sequence):
            raise ValidationException(
                "Dataset rows must be a list of row mappings",
                field_errors={"rows": [f"expected a list, got {type(rows).__name__}"]},
            )

        copied: list[dict[str, Any]] = []
        row_errors: dict[str, list[str]] = {}
        for index, row in enumerate(rows):
            if not isinstance(row, Mapping):
                row_errors[f"rows[{index}]"] = [f"expected a mapping, got {type(row).__name__}"]
                continue
            copied.append(dict(row))
        if row_errors:
            raise ValidationException("Dataset rows must be mappings", field_errors=row_errors)

        if columns is not None and (isinstance(columns, (str, bytes)) or not isinstance(columns, Sequence)):
            raise ValidationException(
                "Dataset columns must be a list of names",
                field_errors={"columns": [f"expected a list, got {type(columns).__name__}"]},
            )

        try:
            return cls(rows=copied, columns=list(columns) if columns is not None else [])
        except ValidationError as e:
            field_errors: dict[str, list[str]] = {}
            for err in e.errors():
                loc = ".".join(str(part) for part in err["loc"]) or "dataset"
                field_errors.setdefault(loc, []).append(err["msg"])
            raise ValidationException("Invalid dataset", field_errors=field_errors, cause=e) from e

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "Dataset":
        """Build a dataset from a DataFrame; NaN/NaT become None."""
        columns = [str(c) for c in df.columns]
        rows = [
            {col: _python_scalar(value) for col, value in zip(columns, record)}
            for record in df.itertuples(index=False, name=None)
        ]
        return cls.from_rows(rows, columns)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.columns)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def copy_rows(self) -> list[Row]:
        """Fresh row dicts for operators that transform values."""
        return [dict(row) for row in self.rows]

    def to_frame(self) -> pd.DataFrame:
        """Render the dataset as a DataFrame with the declared column order."""
        return pd.DataFrame(self.rows, columns=self.columns)


def _python_scalar(value: Any) -> CellValue:
    if value is None:
        return None
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and math.isnan(value):
        return None
    if value is pd.NaT:
        return None
    if isinstance(value, (pd.Timestamp, datetime, date)):
        return value.isoformat()
    if isinstance(value, _SCALAR_TYPES):
        return value
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return str(value)
