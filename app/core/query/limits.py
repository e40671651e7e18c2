import math
import re

_LIMIT_RE = re.compile(r"\bLIMIT\s+\d+", re.IGNORECASE)
_TRAILING_SEMICOLON_RE = re.compile(r";\s*$")


def apply_limit_offset(sql: str, limit: int, offset: int) -> str:
    """
    Append `LIMIT <limit> OFFSET <offset>` to a statement that has no LIMIT yet.

    A statement that already carries its own LIMIT is returned trimmed and
    without its trailing semicolon, but otherwise untouched.
    """
    trimmed = _TRAILING_SEMICOLON_RE.sub("", sql.strip(), count=1)
    if _LIMIT_RE.search(trimmed):
        return trimmed
    return f"{trimmed} LIMIT {math.floor(limit)} OFFSET {math.floor(offset)}"
