"""Tests for the FocusTime integration."""
