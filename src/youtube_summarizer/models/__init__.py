"""Pydantic models for YouTube metadata and summarize requests/results."""
