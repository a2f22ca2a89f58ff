"""Compose-and-place block puzzle engine with a Gymnasium environment."""
