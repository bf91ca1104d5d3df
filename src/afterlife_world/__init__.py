"""Afterlife world lifecycle management."""
