"""
App manifest reader.

This package handles:
1. Opening app packages
2. Locating the manifest entry
3. Decoding it into an AppManifest
"""

from .extractor import ManifestExtractor

__all__ = ["ManifestExtractor"]
