"""Configuration provider adapters."""
