"""Tests - circuit, chip and reference hash test suite."""
