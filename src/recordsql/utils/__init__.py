"""Shared utilities for recordsql."""
