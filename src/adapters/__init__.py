"""Adapters that connect the core pipeline to HTTP sources and key-value stores."""
