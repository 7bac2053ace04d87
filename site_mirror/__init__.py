# site_mirror/__init__.py
"""
SiteMirror package initializer.
Defines package version and exposes the mirroring session and CLI.
"""
__version__ = "0.1.0"

from site_mirror.crawler.crawler import MirrorSession
from site_mirror.cli import cli

__all__ = ["__version__", "MirrorSession", "cli"]
