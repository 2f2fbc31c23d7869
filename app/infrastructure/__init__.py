"""
Infrastructure adapters.

Each adapter implements a domain port (ABC) and connects
to external systems: the SQL database and the cache.
"""
