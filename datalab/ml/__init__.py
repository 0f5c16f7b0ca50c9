# DataLab Engine - ML Package
"""Local statistics components behind the agent operations.

Modules are imported directly, e.g.:
    from datalab.ml.outlier_detection import OutlierDetectionEngine
"""

__all__ = [
    # Shared
    "base",
    "type_inference",
    # Cleaning
    "duplicate_detection",
    "missing_values",
    "text_normalization",
    # Analysis
    "outlier_detection",
    "summary_statistics",
    "data_validation",
    "correlation_analysis",
    "trend_analysis",
]
