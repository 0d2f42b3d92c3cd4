"""
Core utilities shared across the Students API.

This package hosts configuration helpers (env vars, database URL, feature
flags), the logging setup and the error-to-HTTP mapping. Routers and
repositories depend on these primitives instead of reading os.environ.
"""
