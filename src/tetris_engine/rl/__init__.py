"""Agent drivers for the gymnasium environment."""
