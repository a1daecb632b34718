"""Filter registry and storage policy layer.

This package catalogs named HDF5 compression strategies and turns them
into per-dataset chunking and filter pipeline policies.
"""
