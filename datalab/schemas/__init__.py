# DataLab Engine - Schemas
"""Boundary models for the dataset exchange format."""

from datalab.schemas.dataset import CellValue, Dataset, Row

__all__ = ["CellValue", "Dataset", "Row"]
