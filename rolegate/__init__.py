"""Rolegate: user and role management with JWT auth and per-request transaction IDs."""
