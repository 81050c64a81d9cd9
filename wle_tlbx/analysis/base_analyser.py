"""Base analyzer class for all analysis components of the WLE toolbox."""

from abc import ABC, abstractmethod
from typing import Any


class BaseAnalyser(ABC):
    """Abstract base class for pipeline stages.

    All analyzers must:
    1. Accept a DatasetView (or a fitted artifact plus a view) in their constructor
    2. Implement fit() to perform the computation and return self for chaining
    3. Implement result() to return a frozen dataclass with results

    Analyzers never modify the view they were given; every stage hands a new
    snapshot to the next one.

    ---

    ### Adding a New Analyzer

    ```python
    from dataclasses import dataclass
    from wle_tlbx.data.views import DatasetView

    @dataclass(frozen=True)
    class MyAnalysisResult:
        '''Results package for MyAnalyzer.'''
        summary: pd.DataFrame

    class MyAnalyzer(BaseAnalyser):
        '''Pure computation analyzer (no plotting!).'''

        def __init__(self, view: DatasetView):
            self._view = view
            self._fitted = False

        def fit(self) -> "MyAnalyzer":
            # ... computation logic ...
            self._fitted = True
            return self

        def result(self) -> MyAnalysisResult:
            if not self._fitted:
                raise ValueError("Call fit() first")
            return MyAnalysisResult(...)
    ```

    Then add a ``make_my_analyzer`` factory to `BaseDataset` and, if the result
    should be visualized, a ``plot_*`` function in ``plotting/`` that accepts
    the result dataclass and returns a matplotlib ``Figure``.
    """

    @abstractmethod
    def fit(self) -> "BaseAnalyser":
        """Fit the analyzer to the data.

        Returns:
            Self for method chaining.
        """
        ...

    @abstractmethod
    def result(self) -> Any:
        """Return analysis results as a frozen dataclass instance.

        Raises:
            ValueError: If fit() has not been called yet.
        """
        ...
