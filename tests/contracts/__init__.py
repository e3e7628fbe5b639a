"""Tests for policy, result and error contracts."""
