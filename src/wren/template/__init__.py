"""Templates — grammar recognizer, compiled model, and compiler.

Templates are compiled once into an immutable structure and reused
for every render and match.
"""
