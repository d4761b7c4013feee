"""Routing — ordered template matching and named URL building."""
