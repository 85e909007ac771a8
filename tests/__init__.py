"""Test suite for the inventory performance engine."""
