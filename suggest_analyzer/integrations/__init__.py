"""Thin clients for the Google endpoints used by the pipeline."""
