"""Durable storage and (de)serialization."""
