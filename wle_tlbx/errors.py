"""Exceptions raised by the WLE toolbox.

Every failure aborts a pipeline run. All errors derive from :class:`ValueError`
so callers that already guard analyzer misuse with ``except ValueError`` keep
working.
"""


class WLEPipelineError(ValueError):
    """Base class for all toolbox errors."""


class MalformedInputError(WLEPipelineError):
    """The input table could not be parsed or lacks required columns/labels."""


class EmptyPredictorSet(WLEPipelineError):
    """Predictor filtering removed every non-label column."""


class NonSquareCorrelation(WLEPipelineError):
    """Correlation was requested for fewer than two numeric columns (or a non-square matrix)."""


class InsufficientFoldSize(WLEPipelineError):
    """A cross-validation fold would hold fewer rows than there are label categories."""


class LabelMismatch(WLEPipelineError):
    """The evaluation table carries label categories unseen during training."""


__all__ = [
    "EmptyPredictorSet",
    "InsufficientFoldSize",
    "LabelMismatch",
    "MalformedInputError",
    "NonSquareCorrelation",
    "WLEPipelineError",
]
