from __future__ import annotations

import re
from typing import List


def strip_comment(line: str, prefix: str = "#") -> str:
    """
    Drops everything from the comment prefix onwards.
    """
    index = line.find(prefix)
    if index != -1:
        line = line[:index]
    return line.strip()


def split_fields(line: str) -> List[str]:
    """
    Splits a line on runs of whitespace.
    """
    line = line.strip()
    if not line:
        return []
    return re.split(r"\s+", line)


def format_number(value: float) -> str:
    """
    Shortest text that parses back to the same float.
    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)
