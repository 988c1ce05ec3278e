from __future__ import annotations

from pathlib import Path

from flatten_remote.config import INSTRUCTIONS


def build_output(contents: str, *, include_instructions: bool = False) -> str:
    """Assemble the final text artifact.

    Args:
        contents (str): the collected "File: <path>" records
        include_instructions (bool): prefix the records with the analysis prompt

    Returns:
        str: the text to write, the prompt (if any) followed directly by the records
    """
    if include_instructions:
        return INSTRUCTIONS + contents
    return contents


def output_filename(repo: str) -> str:
    return f"{repo}_contents.txt"


def write_output(path: str | Path, text: str) -> Path:
    """Write the artifact as UTF-8 and return its path."""
    out_path = Path(path)
    out_path.write_text(text, encoding="utf-8")
    return out_path
