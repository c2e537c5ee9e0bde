"""
Daily Paper newspaper-subscription service.

This package provides a FastAPI application over a key-value store, a hosted
identity provider and a news aggregator, plus the client application that
drives it (``dailypaper.client``).
"""
