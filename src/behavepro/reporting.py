"""Summaries of installed feature files."""

import os
from pathlib import Path
from typing import Union


def count_features(path: Union[str, Path]) -> int:
    """Count the entries directly inside a project directory."""
    return sum(1 for _ in Path(path).iterdir())


def format_summary(count: int, path: Union[str, Path]) -> str:
    """
    Build the message shown after a project has been saved.

    The noun is singular only for exactly one feature.
    """
    noun = "feature" if count == 1 else "features"
    return f"Saved {count} {noun} to {os.path.abspath(path)}/"

