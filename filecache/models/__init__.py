"""Persisted entry and result models."""
