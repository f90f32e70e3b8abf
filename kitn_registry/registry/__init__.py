"""Registry — scan component manifests and publish them as static JSON.

The registry layer provides:
- Scanning: find component directories and parse their manifests
- Building: inline source files into registry items and write snapshots
- Versioning: numeric-aware ordering and write-once version snapshots
"""
