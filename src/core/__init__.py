"""Core domain package for nodesync.

Core contains decoding, link parsing, deduplication and persistence logic
without any HTTP or storage-specific code, keeping the pipeline portable.
"""
