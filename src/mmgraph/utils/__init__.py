"""
Utility functions for mmgraph.

Low-level helpers used across the system.
No domain logic should live here.
"""

from mmgraph.utils.text import strip_comment, split_fields, format_number

__all__ = [
    "strip_comment",
    "split_fields",
    "format_number",
]
