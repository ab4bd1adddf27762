"""Optimization features: classification, caching, batching and orchestration."""
