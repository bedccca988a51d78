"""Core settings, errors and version compatibility."""
