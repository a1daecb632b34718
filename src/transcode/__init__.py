"""Selective hierarchical transcoding engine.

This package mirrors an HDF5 object graph into a new container and
re-encodes target datasets under a filter spec's storage policy.
"""
