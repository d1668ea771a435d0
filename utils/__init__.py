"""Shared utilities for the configurator library."""
