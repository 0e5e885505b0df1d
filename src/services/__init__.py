"""Business logic services used by handlers.

Services are imported lazily by handlers so a route that never touches the
database does not open a connection pool at import time.
"""

# Do NOT import services here - use lazy loading in handlers instead
