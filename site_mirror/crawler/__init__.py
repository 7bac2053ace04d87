# site_mirror/crawler/__init__.py
"""Traversal engine and its per-URL pipeline stages."""
