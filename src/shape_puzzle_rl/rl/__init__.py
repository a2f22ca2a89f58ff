"""Command-line runners for agents playing ShapePuzzle-v0."""
