"""Logging and naming helpers."""
