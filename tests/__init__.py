"""Tests for the persevere package."""
