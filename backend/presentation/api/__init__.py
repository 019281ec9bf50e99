"""API REST del dashboard."""
