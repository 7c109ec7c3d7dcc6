"""Adapters – concrete infrastructure behind the application ports."""
