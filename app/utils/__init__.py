"""Shared helpers: request field validation and the Graph mail client."""
