"""
Book Cache caching package.

Single-tier cache primitives: the Redis TTL store, the key policy that maps
lookups to keys, hit/miss accounting and explicit invalidation. Expiry is
TTL-only; there is no eviction policy of our own.
"""
