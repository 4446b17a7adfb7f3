"""
relfetch - list and download release assets from GitHub.

Pipeline:
- options: command-line parsing and validation into an immutable Options
- api: release query construction and the single release request
- models: Release/Asset entities and asset-pattern filtering
- presenter: text and JSON listings
- downloader: per-asset fetch into the output directory
- cli: entry point
"""
