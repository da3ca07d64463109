# tests/property/__init__.py
"""Property-based tests for crmforward.

Property-based testing checks invariants that must hold for ALL generated
inputs, not just hand-picked cases.

Test categories:
- test_payload_properties: payload determinism, key order, timestamp format
- test_blob_key_properties: blob key shape and metadata user id

Strategies come from tests/strategies/.
"""
