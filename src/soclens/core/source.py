"""Raw log document loading.

Reads the JSON payload a log-store endpoint such as /logs/session
returns, or a JSONL export. Individual documents are not validated here;
that is the normalizer's job.
"""

import json
import sys
from pathlib import Path
from typing import Any

from soclens.core.errors import InputError

WRAPPER_KEYS = ("logs", "data", "hits")


def load_documents(path: Path | str) -> list[Any]:
    """Load raw log documents from a file, or stdin when path is "-".

    Args:
        path: JSON array file, JSON object wrapping the array, or JSONL

    Returns:
        List of raw documents (any shape)

    Raises:
        InputError: If the input cannot be read or decoded
    """
    if str(path) == "-":
        content = sys.stdin.read()
        source = "<stdin>"
    else:
        path = Path(path)
        if not path.exists():
            raise InputError(f"File not found: {path}", path=str(path))
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise InputError(f"Failed to read {path}: {e}", path=str(path))
        source = str(path)

    return parse_documents(content, source=source)


def parse_documents(content: str, source: str | None = None) -> list[Any]:
    """Decode raw documents from text."""
    stripped = content.strip()
    if not stripped:
        return []

    try:
        data = json.loads(stripped)
    except json.JSONDecodeError:
        return _parse_jsonl(stripped, source)

    if isinstance(data, list):
        return data

    if isinstance(data, dict):
        for key in WRAPPER_KEYS:
            wrapped = data.get(key)
            if isinstance(wrapped, list):
                return wrapped
        # A single document
        return [data]

    raise InputError("Expected a JSON array or object of log documents", path=source)


def _parse_jsonl(content: str, source: str | None) -> list[Any]:
    """Decode one JSON document per non-blank line."""
    documents = []
    for line_no, line in enumerate(content.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            documents.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise InputError(f"Invalid JSON on line {line_no}: {e.msg}", path=source)
    return documents
