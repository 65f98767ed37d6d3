from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from latencylens.models import HistogramSummary


class Reporter(ABC):
    """Render histogram summaries for presentation."""

    @abstractmethod
    def render(self, summary: HistogramSummary, name: str) -> None:
        """Render the summary to the configured output."""
        raise NotImplementedError
