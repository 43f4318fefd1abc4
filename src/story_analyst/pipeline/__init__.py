"""Pipeline orchestration layer.

Runs profile -> merge -> prompt -> model -> extract for one request and
converts failures into a single user-facing outcome at the boundary.
"""

from .request import AnalysisRequest, request_from_payload
from .run import AnalysisOutcome, analyze, prepare_prompt, run_analysis

__all__ = [
    "AnalysisOutcome",
    "AnalysisRequest",
    "analyze",
    "prepare_prompt",
    "request_from_payload",
    "run_analysis",
]
