"""Output layer: terminal rendering of build results."""
