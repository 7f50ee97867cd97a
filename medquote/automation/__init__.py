"""Outbound integrations (quote-intake endpoint)."""
