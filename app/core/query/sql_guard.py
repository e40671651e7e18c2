import re
from dataclasses import dataclass
from typing import Optional


# -----------------------------------------------------------------------------
# SQL GUARD - Read-only allow-list
# Purpose: decide whether a SQL string may run, before any connection is opened
# This is a lexical filter, not a parser. Rule order and reason strings are
# part of the API contract.
# -----------------------------------------------------------------------------

EMPTY_QUERY = "Empty query"
ONLY_SELECT = "Only SELECT queries are allowed"
FORBIDDEN_STATEMENT = "Query contains forbidden statement(s)"
SINGLE_STATEMENT = (
    "Only a single SELECT statement is allowed (no semicolon-separated commands)"
)

FORBIDDEN_KEYWORDS = (
    "INSERT",
    "UPDATE",
    "DELETE",
    "DROP",
    "TRUNCATE",
    "ALTER",
    "CREATE",
    "GRANT",
    "REVOKE",
    "EXECUTE",
)

# Literals and comments are not special-cased: "WHERE note = 'drop'" is rejected too
_FORBIDDEN_RE = re.compile(
    r"\b(" + "|".join(FORBIDDEN_KEYWORDS) + r")\b", re.IGNORECASE
)
_TRAILING_SEMICOLON_RE = re.compile(r";\s*$")


@dataclass(frozen=True)
class ValidationVerdict:
    allowed: bool
    reason: Optional[str] = None


def validate_sql(sql: str) -> ValidationVerdict:
    """
    Validate that a SQL string is a single read-only SELECT.

    Rules (first match wins):
    1. empty after trimming
    2. must start with SELECT
    3. no forbidden keyword anywhere (catches "SELECT 1; DROP ...")
    4. no semicolon except one trailing one (catches "SELECT 1; SELECT 2")

    Never raises; returns a verdict.
    """
    trimmed = (sql or "").strip()
    if not trimmed:
        return ValidationVerdict(allowed=False, reason=EMPTY_QUERY)

    if not trimmed.upper().startswith("SELECT"):
        return ValidationVerdict(allowed=False, reason=ONLY_SELECT)

    if _FORBIDDEN_RE.search(trimmed):
        return ValidationVerdict(allowed=False, reason=FORBIDDEN_STATEMENT)

    without_trailing = _TRAILING_SEMICOLON_RE.sub("", trimmed, count=1)
    if ";" in without_trailing:
        return ValidationVerdict(allowed=False, reason=SINGLE_STATEMENT)

    return ValidationVerdict(allowed=True)
