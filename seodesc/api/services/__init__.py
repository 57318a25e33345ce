"""Application services."""

from .competitor_analysis import CompetitorAnalysis, CompetitorAnalyzer, ranks_in_top
from .container import ServiceContainer
from .description_writer import DescriptionWriter

__all__ = [
    "CompetitorAnalysis",
    "CompetitorAnalyzer",
    "DescriptionWriter",
    "ServiceContainer",
    "ranks_in_top",
]
