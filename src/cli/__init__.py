"""Command-line interface for FilterBench."""
