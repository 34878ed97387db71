"""Command line interface for the ITS registry validator."""
