# tests/contracts/__init__.py
"""Tests for contracts package.

Covers the host-side value types, the error types surfaced to the CRM host,
and the sink write descriptor.
"""
