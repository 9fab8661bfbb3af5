"""Clients for external providers and persistence-backed services."""
