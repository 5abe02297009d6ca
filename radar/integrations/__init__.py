"""Clients for services outside the radar."""
