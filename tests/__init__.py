"""Test suite for the telnet runner."""
