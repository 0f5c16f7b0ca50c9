# DataLab Engine - Integration Tests: Agent Runner
# Dispatch, registry, error wrapping and the result envelope

import sys
import os
import json
import unittest

# Add parent to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from tests.synthetic_data_generator import SyntheticDataGenerator


ALL_OPERATIONS = [
    "remove-duplicates",
    "handle-missing",
    "normalize-text",
    "detect-outliers",
    "generate-summary",
    "data-validator",
    "correlation-analyzer",
    "trend-analyzer",
]


class TestRunAgent(unittest.TestCase):
    """Tests for run_agent dispatch."""

    @classmethod
    def setUpClass(cls):
        cls.generator = SyntheticDataGenerator(seed=42)
        cls.customer_rows = cls.generator.generate_customer_rows(n_rows=120)

    def test_every_operation_on_empty_input(self):
        from datalab import run_agent

        for operation in ALL_OPERATIONS:
            with self.subTest(operation=operation):
                result = run_agent(operation, [])
                payload = result.to_dict()
                self.assertEqual(payload["processedData"], [])
                self.assertIsInstance(payload["analysis"]["reasoning"], str)
                self.assertTrue(payload["analysis"]["reasoning"].startswith("No data to"))
                self.assertEqual(payload["analysis"]["agentType"], operation)

    def test_every_operation_on_synthetic_rows(self):
        from datalab import run_agent

        for operation in ALL_OPERATIONS:
            with self.subTest(operation=operation):
                payload = run_agent(operation, self.customer_rows).to_dict()
                analysis = payload["analysis"]
                self.assertEqual(analysis["provider"], "local")
                self.assertIsInstance(analysis["insights"], list)
                self.assertTrue(analysis["reasoning"])
                # must survive a JSON encoder untouched
                json.dumps(payload)

    def test_enum_and_dataset_inputs(self):
        from datalab import AgentOperation, Dataset, run_agent

        rows = [{"id": 1, "name": " Bob "}, {"id": 1, "name": " Bob "}, {"id": 2, "name": "alice"}]
        result = run_agent(AgentOperation.REMOVE_DUPLICATES, Dataset.from_rows(rows))

        self.assertEqual(len(result.processed_data), 2)
        self.assertEqual(result.analysis.duplicate_rows, [2])

    def test_explicit_columns(self):
        from datalab import run_agent

        rows = [{"a": 1, "b": "x"}, {"a": 1, "b": "y"}]
        result = run_agent("remove-duplicates", rows, columns=["a"])
        self.assertEqual(result.analysis.duplicates_found, 1)

    def test_caller_rows_not_mutated(self):
        from datalab import run_agent

        rows = [{"name": "  MIXED case  "}, {"name": None}]
        run_agent("normalize-text", rows)
        run_agent("handle-missing", rows)
        self.assertEqual(rows, [{"name": "  MIXED case  "}, {"name": None}])

    def test_unknown_operation(self):
        from datalab import UnknownOperationException, run_agent

        with self.assertRaises(UnknownOperationException) as ctx:
            run_agent("column-transformer", [{"a": 1}])

        err = ctx.exception
        self.assertEqual(err.operation, "column-transformer")
        self.assertIn("column-transformer", str(err))
        self.assertEqual(sorted(err.supported_operations), sorted(ALL_OPERATIONS))
        self.assertEqual(err.to_dict()["error_code"], "E8004")

    def test_non_list_input_rejected(self):
        from datalab import ValidationException, run_agent

        with self.assertRaises(ValidationException):
            run_agent("generate-summary", "not rows")
        with self.assertRaises(ValidationException):
            run_agent("generate-summary", [1, 2, 3])

    def test_settings_override(self):
        from datalab import EngineSettings, run_agent

        rows = [{"v": v} for v in [1, 2, 3, 4, 5, 6, 7, 8, 9, 100]]
        default = run_agent("detect-outliers", rows)
        relaxed = run_agent("detect-outliers", rows, settings=EngineSettings(iqr_multiplier=100))

        self.assertEqual(default.analysis.total_outliers, 1)
        self.assertEqual(relaxed.analysis.total_outliers, 0)

    def test_operator_failure_wrapped(self):
        from datalab import DataProcessingException, run_agent
        from datalab.compute.registry import OperatorRegistry

        class ExplodingOperator:
            name = "generate-summary"

            def run(self, dataset, settings=None):
                raise ZeroDivisionError("boom")

        registry = OperatorRegistry()
        registry.register(ExplodingOperator())

        with self.assertRaises(DataProcessingException) as ctx:
            run_agent("generate-summary", [{"a": 1}], registry=registry)
        self.assertIsInstance(ctx.exception.cause, ZeroDivisionError)
        self.assertIsInstance(ctx.exception.__cause__, ZeroDivisionError)


class TestOperatorRegistry(unittest.TestCase):
    """Tests for the registry and operation catalog."""

    def test_default_registry_lists_all(self):
        from datalab import list_operations
        from datalab.compute.registry import default_registry

        self.assertEqual(default_registry().list(), sorted(ALL_OPERATIONS))
        self.assertEqual(list_operations(), sorted(ALL_OPERATIONS))

    def test_get_accepts_enum(self):
        from datalab.compute.registry import default_registry
        from datalab.ml.base import AgentOperation
        from datalab.ml.trend_analysis import TrendAnalysisEngine

        op = default_registry().get(AgentOperation.TREND_ANALYZER)
        self.assertIsInstance(op, TrendAnalysisEngine)

    def test_unknown_name(self):
        from datalab.compute.registry import OperatorRegistry
        from datalab.core.exceptions import UnknownOperationException

        with self.assertRaises(UnknownOperationException):
            OperatorRegistry().get("detect-outliers")

    def test_describe_operation(self):
        from datalab import describe_operation

        self.assertIn("Identify temporal patterns", describe_operation("trend-analyzer"))
        self.assertIn("Identify statistical outliers", describe_operation("detect-outliers"))
        self.assertIn("General data processing and analysis", describe_operation("data-classifier"))

    def test_operation_count(self):
        from datalab import AgentOperation

        self.assertEqual(len(list(AgentOperation)), 8)


if __name__ == '__main__':
    unittest.main()
