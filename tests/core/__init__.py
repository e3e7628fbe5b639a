"""Tests for settings loading and logging setup."""
