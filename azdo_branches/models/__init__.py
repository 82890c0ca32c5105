"""Data models for azdo-branches."""
