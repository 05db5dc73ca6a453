"""Data models for resource deletion."""
