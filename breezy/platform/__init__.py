"""Adapters for the release-hosting platform."""
