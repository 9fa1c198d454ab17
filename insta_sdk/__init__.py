"""Insta SDK for Python.

This SDK provides the request dispatch layer for the Instagram private API.

Public API:
    InstaClient - Client owning transport, queues, headers and cookies
    Settings - Client configuration
    ResponseModel - Base model for typed responses

Internal (system-level, not for direct use):
    _internal.dispatch - Request building, dispatch and decoding
"""

from insta_sdk._version import __version__
from insta_sdk.client import InstaClient, Settings
from insta_sdk.models import ResponseModel

__all__ = ["__version__", "InstaClient", "Settings", "ResponseModel"]
