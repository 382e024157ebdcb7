"""Bulk submission of icon requests to the statistics service."""

__version__ = "0.1.0"
