"""Data-to-DTO mappers for web service responses."""
