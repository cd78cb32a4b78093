"""Test suite for dtrquiz."""
