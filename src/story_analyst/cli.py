from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

import typer

from .analytics import load_metric_snapshot
from .config import Settings
from .documents import load_document
from .errors import AnalysisError
from .ingest import load_tabular_csv
from .llm import build_gateway
from .pipeline import AnalysisRequest, prepare_prompt, request_from_payload, run_analysis
from .profile import summarize_tabular
from .synth import build_context, extract_result
from .utils import read_json, setup_logging, write_json

app = typer.Typer(add_completion=False, help="Story Analyst: profile data and ask a model for the story behind it")

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level")) -> None:
    level = (os.environ.get("STORY_ANALYST_LOG_LEVEL") or "WARNING").upper()
    if level not in _LOG_LEVELS:
        level = "WARNING"
    setup_logging(logging.DEBUG if verbose else level)


def _collect_inputs(
    data: Optional[Path],
    analytics: Optional[Path],
    documents: list[Path],
    request: Optional[Path],
) -> AnalysisRequest:
    """Combine a request body file with individual source files.

    Individual files win over the same source in the request body; documents
    are appended after the request body's documents.
    """
    base = AnalysisRequest()
    if request is not None:
        payload = read_json(request)
        if not isinstance(payload, dict):
            raise ValueError(f"Request body must be a JSON object: {request}")
        base = request_from_payload(payload)

    tabular = load_tabular_csv(data) if data is not None else base.tabular
    snapshot = load_metric_snapshot(analytics) if analytics is not None else base.analytics
    docs = list(base.documents) + [load_document(p) for p in documents]
    return AnalysisRequest(tabular=tabular, analytics=snapshot, documents=docs)


_DATA_OPT = typer.Option(None, "--data", exists=True, dir_okay=False, help="Path to CSV file")
_ANALYTICS_OPT = typer.Option(None, "--analytics", exists=True, dir_okay=False, help="Analytics report JSON")
_DOCUMENT_OPT = typer.Option([], "--document", exists=True, dir_okay=False, help="Document to include (repeatable)")
_REQUEST_OPT = typer.Option(None, "--request", exists=True, dir_okay=False, help="Analyze request body JSON")


@app.command()
def analyze(
    data: Optional[Path] = _DATA_OPT,
    analytics: Optional[Path] = _ANALYTICS_OPT,
    document: list[Path] = _DOCUMENT_OPT,
    request: Optional[Path] = _REQUEST_OPT,
    out: Optional[Path] = typer.Option(None, "--out", help="Write the result JSON here instead of stdout"),
    timeout: Optional[float] = typer.Option(None, "--timeout", min=0.1, help="Model call deadline in seconds"),
) -> None:
    """
    Profile the inputs, ask the configured model for a narrative, and print
    the validated result as JSON.
    """
    try:
        inputs = _collect_inputs(data, analytics, document, request)
        gateway = build_gateway(Settings.from_env())
    except FileNotFoundError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=2)
    except Exception as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1)

    outcome = run_analysis(
        gateway,
        tabular=inputs.tabular,
        analytics=inputs.analytics,
        documents=inputs.documents,
        timeout=timeout,
    )
    if not outcome.ok or outcome.result is None:
        typer.echo(f"ERROR: {outcome.error}", err=True)
        raise typer.Exit(code=1)

    payload = outcome.result.to_payload()
    if out is not None:
        write_json(out, payload)
        typer.echo(f"Result: {out}")
    else:
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command()
def context(
    data: Optional[Path] = _DATA_OPT,
    analytics: Optional[Path] = _ANALYTICS_OPT,
    document: list[Path] = _DOCUMENT_OPT,
    request: Optional[Path] = _REQUEST_OPT,
) -> None:
    """Print the merged context block that would be sent to the model."""
    try:
        inputs = _collect_inputs(data, analytics, document, request)
        dataset = summarize_tabular(inputs.tabular) if inputs.tabular is not None else None
        text = build_context(dataset, inputs.analytics, inputs.documents)
    except AnalysisError as e:
        typer.echo(f"ERROR: {e.user_message}", err=True)
        raise typer.Exit(code=1)
    except FileNotFoundError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=2)
    except Exception as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(text)


@app.command()
def prompt(
    data: Optional[Path] = _DATA_OPT,
    analytics: Optional[Path] = _ANALYTICS_OPT,
    document: list[Path] = _DOCUMENT_OPT,
    request: Optional[Path] = _REQUEST_OPT,
) -> None:
    """Print the full prompt without calling the model."""
    try:
        inputs = _collect_inputs(data, analytics, document, request)
        text = prepare_prompt(tabular=inputs.tabular, analytics=inputs.analytics, documents=inputs.documents)
    except AnalysisError as e:
        typer.echo(f"ERROR: {e.user_message}", err=True)
        raise typer.Exit(code=1)
    except FileNotFoundError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=2)
    except Exception as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(text)


@app.command("parse-response")
def parse_response(
    file: Path = typer.Option(..., "--file", exists=True, dir_okay=False, help="Saved raw model reply"),
) -> None:
    """Validate a saved model reply and print the normalized result."""
    try:
        result = extract_result(file.read_text(encoding="utf-8"))
    except AnalysisError as e:
        typer.echo(f"ERROR: {e.user_message} ({e})", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(result.to_payload(), indent=2, ensure_ascii=False))
