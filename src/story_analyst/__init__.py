"""Profile business data, build a bounded prompt, and validate the model's story."""

from .pipeline import AnalysisOutcome, analyze, run_analysis

__version__ = "0.1.0"

__all__ = ["AnalysisOutcome", "analyze", "run_analysis", "__version__"]
