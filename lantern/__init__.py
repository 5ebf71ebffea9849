"""Shared Lantern - daily log, weekly council and the scribe's notes."""
