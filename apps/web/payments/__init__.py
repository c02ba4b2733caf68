"""Payments module - reservation deposits via Stripe."""
