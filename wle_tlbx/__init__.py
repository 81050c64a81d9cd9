"""Toolbox for classifying exercise quality from the Weight Lifting Exercises accelerometer data."""

from .config import DEFAULT_PIPELINE_CFG, PipelineConfig
from .data import WeightLiftingDataset, WLECol
from .pipeline import PipelineReport, run_pipeline


__all__ = ["DEFAULT_PIPELINE_CFG", "PipelineConfig", "PipelineReport", "WLECol", "WeightLiftingDataset", "run_pipeline"]
