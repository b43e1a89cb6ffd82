"""Groundwork command-line interface."""
