from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any


def setup_logging(level: int | str = logging.WARNING) -> None:
    """Configure the root logger once per process."""
    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        return

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root_logger.setLevel(level)
    root_logger.addHandler(handler)


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def write_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
