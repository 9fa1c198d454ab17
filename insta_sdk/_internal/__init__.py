"""Internal modules for Insta SDK.

WARNING: This package contains system-level modules used by InstaClient.
These are not intended for direct use in application code.

Modules:
    dispatch - Request building, dispatch, decoding and cookie restore
    http - Shared HTTP client configuration and default transport
    queues - Work queues backing asynchronous dispatch
"""
