"""Capital: personal finance tracking backend."""
