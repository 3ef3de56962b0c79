"""HTTP API for the type change application."""
