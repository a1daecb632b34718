"""Benchmark orchestration layer.

This package runs the transcoding engine once per registered filter
spec, compares output sizes against the baseline, and writes reports.
"""
