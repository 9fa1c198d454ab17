"""Encoding of request bodies into wire payloads."""

import gzip
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from insta_sdk._internal.dispatch.models import Body, GzipParameters, Parameters, RawBytes


@dataclass(frozen=True)
class EncodedBody:
    """Wire-ready payload and the headers it requires."""

    content: bytes | None = None
    headers: dict[str, str] = field(default_factory=dict)


def encode_parameters(params: Mapping[str, Any]) -> bytes | None:
    """Serialize form parameters as `key=value` pairs joined by `&`.

    Values are not percent-encoded: callers must pass transport-safe values.
    A value containing `&` or `=` produces an ambiguous payload.

    Returns:
        The UTF-8 payload, or None when `params` is empty.
    """
    if not params:
        return None
    return "&".join(f"{name}={value}" for name, value in params.items()).encode("utf-8")


def encode_body(
    body: Body | None,
    *,
    log: Callable[[str], None] | None = None,
) -> EncodedBody:
    """Turn a body variant into a payload and the headers to add.

    Args:
        body: The body to encode, or None for no body.
        log: Optional debug logger, told when gzip compression fails.

    Returns:
        The encoded body. Compression failures leave `content` unset
        instead of raising.
    """
    if body is None:
        return EncodedBody()
    if isinstance(body, Parameters):
        return EncodedBody(content=encode_parameters(body.params))
    if isinstance(body, RawBytes):
        return EncodedBody(content=bytes(body.data))
    if isinstance(body, GzipParameters):
        content = encode_parameters(body.params)
        if content is not None:
            try:
                content = gzip.compress(content)
            except (OSError, ValueError) as e:
                if log is not None:
                    log(f"Gzip compression failed, dropping payload: {e}")
                content = None
        return EncodedBody(content=content, headers={"Content-Encoding": "gzip"})
    raise TypeError(f"Unsupported body type: {type(body).__name__}")
