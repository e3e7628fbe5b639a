"""Tests for backoff, recovery, clock and the retry engine."""
