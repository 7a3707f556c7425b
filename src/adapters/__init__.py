"""Adapters driving the application (UI, CLI)."""
