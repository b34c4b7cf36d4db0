"""Account code structure helpers.

Codes are dot-separated digit groups (``1.1.01.001``). The number of groups
is the account's level and dropping the last group yields the parent code.
"""

import re
from typing import Optional

CODE_PATTERN = re.compile(r"^\d+(\.\d+)*$")


def is_valid_code(code: str) -> bool:
    return bool(CODE_PATTERN.match(code or ""))


def validate_code(code: str) -> str:
    """Return the stripped code or raise ValueError if it is malformed."""
    code = (code or "").strip()
    if not is_valid_code(code):
        raise ValueError(
            f"Invalid account code '{code}': expected digit groups separated by dots (e.g. 1.1.01.001)"
        )
    return code


def level_from_code(code: str) -> int:
    """Level is the number of segments: ``"2.1.3.045"`` -> 4."""
    return len(code.split("."))


def parent_code(code: str) -> Optional[str]:
    """Code with the last segment removed, or None for a root code."""
    if "." not in code:
        return None
    return code.rsplit(".", 1)[0]


def code_sort_key(code: str) -> tuple[int, ...]:
    """Sort key that orders ``1.10`` after ``1.9``."""
    return tuple(int(part) for part in code.split("."))
