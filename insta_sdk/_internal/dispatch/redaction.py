"""Redaction of sensitive header values before they reach debug output."""

from collections.abc import Mapping

REDACT_HEADERS: frozenset[str] = frozenset({
    "authorization",
    "cookie",
    "set-cookie",
    "x-csrftoken",
    "x-ig-www-claim",
    "ig-u-ds-user-id",
    "ig-u-rur",
    "proxy-authorization",
})

REDACTED_VALUE = "[REDACTED]"


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of `headers` with sensitive values redacted.

    Header names are matched case-insensitively. The original mapping is never
    mutated.

    Args:
        headers: Header names and values to redact.

    Returns:
        A new dictionary with sensitive values replaced by "[REDACTED]".
    """
    return {
        key: REDACTED_VALUE if key.lower() in REDACT_HEADERS else value
        for key, value in headers.items()
    }


def format_headers(headers: Mapping[str, str]) -> str:
    """Render redacted headers as a single `Key: value; ...` line."""
    return "; ".join(f"{key}: {value}" for key, value in redact_headers(headers).items())
