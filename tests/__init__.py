"""Tests - run via pytest from the repository root."""
