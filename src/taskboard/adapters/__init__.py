"""Adapters module - Transport implementations for different backends.

This package contains concrete implementations (adapters) of the transport
interface:
- rest_api: Remote REST API backend
"""

from .rest_api import RestApiTaskTransport

__all__ = [
    "RestApiTaskTransport",
]
