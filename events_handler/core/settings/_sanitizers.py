"""Helpers to sanitize environment variable values before validation."""

from __future__ import annotations

import json
from typing import Any


def strip_inline_comment(value: str) -> str:
    """Remove inline comments of the form "value  # comment".

    VS Code's env-file parser keeps inline comments, so values like
    ``T-1,T-2  # intake`` show up in the process environment. The check on
    ``value[idx - 1]`` avoids treating strings like ``foo#bar`` as comments
    because there is no preceding whitespace.
    """

    idx = value.find("#")
    if idx == -1:
        return value.strip()
    if idx == 0:
        return ""  # comment-only string
    if not value[idx - 1].isspace():
        return value.strip()
    return value[:idx].strip()


def split_csv(value: Any) -> Any:
    """Turn ``"a, b ,c"`` into ``["a", "b", "c"]``; leave JSON lists alone."""

    if isinstance(value, str):
        cleaned = strip_inline_comment(value)
        if cleaned.startswith("["):
            return json.loads(cleaned)
        return [item.strip() for item in cleaned.split(",") if item.strip()]
    return value
