"""Matching — recover variable values from a URL.

The matcher reverses the default, path-segment and query operators.
Results are immutable ``MatchResult`` mappings.
"""
