"""Generative-AI adapter: HTTP client, table extraction from images, chat."""
