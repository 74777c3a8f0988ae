"""Prompt assembly and stop-sequence composition."""
