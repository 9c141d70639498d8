"""Core domain: readings, points, translation and dispatch."""
