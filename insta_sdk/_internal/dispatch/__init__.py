"""Dispatch system for Insta SDK.

WARNING: This is a system-level module used by InstaClient.
Endpoint wrappers call it through `client.http`.
"""

from insta_sdk._internal.dispatch.body import EncodedBody, encode_body
from insta_sdk._internal.dispatch.client import HttpHelper
from insta_sdk._internal.dispatch.cookies import dump_cookie, restore_cookies
from insta_sdk._internal.dispatch.decoding import decode_outcome
from insta_sdk._internal.dispatch.models import (
    Failure,
    GzipParameters,
    Parameters,
    Payload,
    RawBytes,
    RequestSpec,
    Success,
)
from insta_sdk._internal.dispatch.request import build_request, resolve_url

__all__ = [
    "HttpHelper",
    "RequestSpec",
    "Parameters",
    "RawBytes",
    "GzipParameters",
    "Success",
    "Failure",
    "Payload",
    "EncodedBody",
    "encode_body",
    "build_request",
    "resolve_url",
    "decode_outcome",
    "restore_cookies",
    "dump_cookie",
]
