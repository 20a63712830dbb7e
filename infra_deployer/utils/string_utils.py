"""String helpers for generated resource names"""

import re

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9-]+")


def filter_non_alphanumeric(value: str) -> str:
    """Drop everything except letters, digits and dashes"""
    if not value:
        return ""
    return _NON_ALPHANUMERIC.sub("", value)
