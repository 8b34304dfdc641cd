"""Data models for clients and their telemetry entries."""
