from datalab.compute.operators.base import Operator, describe_operation
from datalab.ml.correlation_analysis import CorrelationAnalysisEngine
from datalab.ml.data_validation import DataValidationEngine
from datalab.ml.duplicate_detection import DuplicateDetectionEngine
from datalab.ml.missing_values import MissingValueEngine
from datalab.ml.outlier_detection import OutlierDetectionEngine
from datalab.ml.summary_statistics import SummaryStatisticsEngine
from datalab.ml.text_normalization import TextNormalizationEngine
from datalab.ml.trend_analysis import TrendAnalysisEngine

AGENT_OPERATORS = (
    DuplicateDetectionEngine,
    MissingValueEngine,
    TextNormalizationEngine,
    OutlierDetectionEngine,
    SummaryStatisticsEngine,
    DataValidationEngine,
    CorrelationAnalysisEngine,
    TrendAnalysisEngine,
)

__all__ = ["AGENT_OPERATORS", "Operator", "describe_operation"]
