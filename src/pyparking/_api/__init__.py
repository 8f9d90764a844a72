"""Endpoint modules. Internal to pyparking."""
