"""Synthesis layer.

Merges profiled sources into a context block, wraps it in the instruction
template, and validates the model's JSON reply.
"""

from .context import build_context
from .extract import extract_result, find_json_object, validate_result_obj
from .prompt import build_prompt

__all__ = ["build_context", "build_prompt", "extract_result", "find_json_object", "validate_result_obj"]
