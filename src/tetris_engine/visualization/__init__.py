"""Pygame front-end: renderer, tone bank and keyboard play."""
