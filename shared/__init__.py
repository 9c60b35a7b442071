"""Shared utilities for the data tools."""
