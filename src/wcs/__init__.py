"""Deterministic wrestling career simulation engine."""
