"""Bundled data files for tarbs."""
