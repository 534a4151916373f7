"""Connectivity probes."""

from .http_probe import AsyncHttpConnectionTest, HttpConnectionTest

__all__ = ["AsyncHttpConnectionTest", "HttpConnectionTest"]
