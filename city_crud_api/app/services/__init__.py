"""
Service layer abstraction.

Each service encapsulates the business logic for a resource.  The
store a service works against is injected, so the in‑memory store can
be swapped for a durable one without changing API handlers.
"""
