from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..errors import AnalysisError
from ..llm import LLMGateway
from ..models import AnalysisResult, DocumentExcerpt, MetricSnapshot, TabularInput
from ..profile import summarize_tabular
from ..synth import build_context, build_prompt, extract_result

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisOutcome:
    """Result of one analysis call as seen at the transport boundary."""

    ok: bool
    status_code: int
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None


def prepare_prompt(
    *,
    tabular: Optional[TabularInput] = None,
    analytics: Optional[MetricSnapshot] = None,
    documents: Optional[Sequence[DocumentExcerpt]] = None,
) -> str:
    """Profile, merge and template the inputs. Raises NoDataError when empty."""
    dataset = summarize_tabular(tabular) if tabular is not None else None
    context = build_context(dataset, analytics, documents)
    return build_prompt(context)


def analyze(
    gateway: LLMGateway,
    *,
    tabular: Optional[TabularInput] = None,
    analytics: Optional[MetricSnapshot] = None,
    documents: Optional[Sequence[DocumentExcerpt]] = None,
    timeout: Optional[float] = None,
) -> AnalysisResult:
    """Run the full pipeline once.

    profile -> merge -> prompt -> model call -> extract. Every step runs
    sequentially; the model call is the only network round-trip and is
    skipped entirely when no source qualifies.
    """
    prompt = prepare_prompt(tabular=tabular, analytics=analytics, documents=documents)
    logger.info("Sending %d-char prompt to model %s", len(prompt), gateway.model)
    text = gateway.complete(prompt, timeout=timeout)
    return extract_result(text)


def run_analysis(
    gateway: LLMGateway,
    *,
    tabular: Optional[TabularInput] = None,
    analytics: Optional[MetricSnapshot] = None,
    documents: Optional[Sequence[DocumentExcerpt]] = None,
    timeout: Optional[float] = None,
) -> AnalysisOutcome:
    """Boundary wrapper around `analyze`.

    Every pipeline failure becomes one user-facing message plus an
    HTTP-equivalent status; diagnostic detail stays in the logs.
    """
    try:
        result = analyze(gateway, tabular=tabular, analytics=analytics, documents=documents, timeout=timeout)
    except AnalysisError as exc:
        logger.error("Analysis failed: %s: %s", type(exc).__name__, exc)
        return AnalysisOutcome(ok=False, status_code=exc.status_code, error=exc.user_message)
    return AnalysisOutcome(ok=True, status_code=200, result=result)
