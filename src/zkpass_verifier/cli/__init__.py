"""Command-line interface for zkpass-verifier."""
