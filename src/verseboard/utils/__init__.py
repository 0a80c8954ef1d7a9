"""Utility helpers for verseboard."""
