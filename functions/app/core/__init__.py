"""Shared constants for the function host and the queue worker."""

SERVICE_NAME = "functions"
