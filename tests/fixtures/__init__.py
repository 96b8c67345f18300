"""
Test Fixtures and Utilities

Deterministic clocks, a seeded two-owner household and random transaction
streams shared across the suite. All data is synthetic.
"""
