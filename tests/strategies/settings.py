# tests/strategies/settings.py
"""Standardized Hypothesis settings profiles for property tests.

Tiers:
- DETERMINISM_SETTINGS: 500 examples - blob key and payload determinism
- STANDARD_SETTINGS: 100 examples - Regular property tests
- QUICK_SETTINGS: 20 examples - Fast validation tests
"""

from hypothesis import settings

DETERMINISM_SETTINGS = settings(max_examples=500)
STANDARD_SETTINGS = settings(max_examples=100)
QUICK_SETTINGS = settings(max_examples=20)
