"""Minimal product and branch catalog used by the test suite."""
