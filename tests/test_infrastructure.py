# DataLab Engine - Unit Tests: Infrastructure
# Dataset schema, settings, exceptions, logging and serialization

import sys
import os
import io
import json
import logging
import unittest
from datetime import datetime
from decimal import Decimal
from unittest import mock
from uuid import UUID

import numpy as np
import pandas as pd

# Add parent to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


class TestDatasetSchema(unittest.TestCase):
    """Tests for the Dataset boundary model."""

    def test_columns_from_first_row(self):
        from datalab.schemas.dataset import Dataset

        dataset = Dataset.from_rows([{"b": 1, "a": 2}, {"a": 3, "c": 4}])
        self.assertEqual(dataset.columns, ["b", "a"])
        self.assertEqual(dataset.row_count, 2)
        self.assertEqual(dataset.column_count, 2)

    def test_empty_rows(self):
        from datalab.schemas.dataset import Dataset

        dataset = Dataset.from_rows([])
        self.assertTrue(dataset.is_empty)
        self.assertEqual(dataset.columns, [])

    def test_rows_are_copied(self):
        from datalab.schemas.dataset import Dataset

        rows = [{"a": 1}]
        dataset = Dataset.from_rows(rows)
        dataset.rows[0]["a"] = 2
        self.assertEqual(rows, [{"a": 1}])

    def test_rejects_non_scalar_cells(self):
        from datalab.core.exceptions import ValidationException
        from datalab.schemas.dataset import Dataset

        with self.assertRaises(ValidationException) as ctx:
            Dataset.from_rows([{"a": [1, 2]}])
        self.assertTrue(ctx.exception.field_errors)

    def test_rejects_non_mapping_rows(self):
        from datalab.core.exceptions import ValidationException
        from datalab.schemas.dataset import Dataset

        with self.assertRaises(ValidationException) as ctx:
            Dataset.from_rows([{"a": 1}, "oops"])
        self.assertIn("rows[1]", ctx.exception.field_errors)

    def test_rejects_duplicate_columns(self):
        from datalab.core.exceptions import ValidationException
        from datalab.schemas.dataset import Dataset

        with self.assertRaises(ValidationException):
            Dataset.from_rows([{"a": 1}], columns=["a", "a"])

    def test_frame_round_trip(self):
        from datalab.schemas.dataset import Dataset

        df = pd.DataFrame({
            "n": np.array([1, 2, 3], dtype=np.int64),
            "x": [1.5, np.nan, 2.5],
            "t": pd.to_datetime(["2024-01-01", None, "2024-01-03"]),
        })
        dataset = Dataset.from_frame(df)

        self.assertEqual(dataset.rows[0]["n"], 1)
        self.assertIsInstance(dataset.rows[0]["n"], int)
        self.assertIsNone(dataset.rows[1]["x"])
        self.assertIsNone(dataset.rows[1]["t"])
        self.assertTrue(dataset.rows[0]["t"].startswith("2024-01-01"))
        self.assertEqual(list(dataset.to_frame().columns), ["n", "x", "t"])


class TestSettings(unittest.TestCase):
    """Tests for EngineSettings."""

    def test_defaults(self):
        from datalab.core.config import EngineSettings

        settings = EngineSettings()
        self.assertEqual(settings.missing_fill_sentinel, "Unknown")
        self.assertEqual(settings.iqr_multiplier, 1.5)
        self.assertEqual(settings.strong_correlation_threshold, 0.7)
        self.assertEqual(settings.top_values_limit, 5)

    def test_environment_override(self):
        from datalab.core.config import EngineSettings

        with mock.patch.dict(os.environ, {"DATALAB_IQR_MULTIPLIER": "3.0"}):
            self.assertEqual(EngineSettings().iqr_multiplier, 3.0)

    def test_frozen_and_validated(self):
        from pydantic import ValidationError

        from datalab.core.config import EngineSettings

        settings = EngineSettings()
        with self.assertRaises(ValidationError):
            settings.iqr_multiplier = 2.0
        with self.assertRaises(ValidationError):
            EngineSettings(iqr_multiplier=-1)

    def test_cached(self):
        from datalab.core.config import get_settings

        self.assertIs(get_settings(), get_settings())


class TestExceptions(unittest.TestCase):
    """Tests for the exception hierarchy."""

    def test_to_dict(self):
        from datalab.core.exceptions import DataProcessingException

        err = DataProcessingException("failed", cause=ValueError("inner"))
        data = err.to_dict()

        self.assertEqual(data["error_type"], "DataProcessingException")
        self.assertEqual(data["error_code"], "E3004")
        self.assertEqual(data["cause"], "inner")
        self.assertIn("error_id", data["context"])

    def test_validation_field_errors(self):
        from datalab.core.exceptions import ValidationException

        err = ValidationException("bad", field_errors={"rows": ["expected a list"]})
        self.assertEqual(err.to_dict()["field_errors"], {"rows": ["expected a list"]})
        self.assertEqual(err.http_status_code, 422)


class TestLogging(unittest.TestCase):
    """Tests for structured logging."""

    def _record(self, context=None, extra_data=None):
        record = logging.LogRecord("datalab.test", logging.INFO, __file__, 1, "hello", None, None)
        record.context = context
        record.extra_data = extra_data or {}
        return record

    def test_json_formatter(self):
        from datalab.core.logging import JSONFormatter, LogContext

        output = JSONFormatter().format(
            self._record(LogContext(operation="detect-outliers"), {"rows": 3})
        )
        data = json.loads(output)

        self.assertEqual(data["message"], "hello")
        self.assertEqual(data["context"]["operation"], "detect-outliers")
        self.assertEqual(data["extra"], {"rows": 3})

    def test_text_formatter(self):
        from datalab.core.logging import LogContext, TextFormatter

        output = TextFormatter().format(self._record(LogContext(operation="run_agent"), {"rows": 3}))
        self.assertIn("op:run_agent", output)
        self.assertIn("rows=3", output)

    def test_request_id_in_output(self):
        from datalab.core.logging import JSONFormatter, clear_request_context, set_request_context

        set_request_context("req-12345678")
        try:
            data = json.loads(JSONFormatter().format(self._record()))
        finally:
            clear_request_context()
        self.assertEqual(data["request_id"], "req-12345678")

    def test_single_handler_per_logger(self):
        from datalab.core.logging import get_logger

        get_logger("datalab.tests.handlers")
        logger = get_logger("datalab.tests.handlers")
        handlers = [h for h in logging.getLogger(logger.name).handlers if getattr(h, "_datalab_handler", False)]
        self.assertEqual(len(handlers), 1)

    def test_execution_time_reraises(self):
        from datalab.core.logging import get_logger, log_execution_time

        logger = get_logger("datalab.tests.timing", level=logging.DEBUG)
        stream = io.StringIO()
        logging.getLogger("datalab.tests.timing").handlers[0].setStream(stream)

        @log_execution_time(logger=logger, operation_name="explode")
        def explode():
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            explode()
        self.assertIn("Failed explode", stream.getvalue())


class TestSerialization(unittest.TestCase):
    """Tests for to_jsonable."""

    def test_numpy_and_pandas_values(self):
        from datalab.core.serialization import to_jsonable

        value = {
            "i": np.int64(3),
            "f": np.float64(1.5),
            "nan": float("nan"),
            "arr": np.array([1, 2]),
            "ts": pd.Timestamp("2024-01-01"),
            "dt": datetime(2024, 1, 2, 3, 4, 5),
            "dec": Decimal("2.5"),
            "uuid": UUID("12345678-1234-5678-1234-567812345678"),
            "set": {1},
            "tuple": (1, "a"),
        }
        out = to_jsonable(value)

        self.assertEqual(out["i"], 3)
        self.assertIsInstance(out["i"], int)
        self.assertEqual(out["f"], 1.5)
        self.assertIsNone(out["nan"])
        self.assertEqual(out["arr"], [1, 2])
        self.assertEqual(out["ts"], "2024-01-01T00:00:00")
        self.assertEqual(out["dt"], "2024-01-02T03:04:05")
        self.assertEqual(out["dec"], 2.5)
        self.assertEqual(out["uuid"], "12345678-1234-5678-1234-567812345678")
        self.assertEqual(out["set"], [1])
        self.assertEqual(out["tuple"], [1, "a"])
        json.dumps(out)


if __name__ == '__main__':
    unittest.main()
