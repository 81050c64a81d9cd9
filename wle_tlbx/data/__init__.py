"""Data module for dataset classes."""

from .partition import PartitionResult, stratified_split
from .views import DatasetView
from .wle_columns import WLEColumn as WLECol
from .wle_dataset import WeightLiftingDataset


__all__ = ["DatasetView", "PartitionResult", "WLECol", "WeightLiftingDataset", "stratified_split"]
