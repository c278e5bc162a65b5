"""
Book Cache proxy application package.

The service sits in front of the Open Library API and answers book lookups
from Redis when it can:
- Lookups: by ISBN or by title search, read-through with a fixed TTL
- Invalidation: explicit removal of a cached ISBN entry
- Metrics: hit/miss counters and a derived hit rate

Structure:
- app.main: FastAPI app, routes, startup/shutdown wiring.
- app.books: lookup value types and the read-through lookup service.
- app.caching: key policy, Redis store, hit accounting, invalidation.
- app.adapters: HTTP client for the origin API.
"""
