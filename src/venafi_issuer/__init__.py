"""Venafi issuer: resolve issuer credentials and build backend connectors."""
