"""Telemetry, settings and background services for the editing core."""
