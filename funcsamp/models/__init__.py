"""Data models shared across the estimation pipeline."""
