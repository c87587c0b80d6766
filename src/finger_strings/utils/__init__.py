"""Shared helpers for FingerStrings."""
