"""Business-logic layer over the in-memory alert store.

- alerts_query.py (read-only query engine: list, lookup, subjects, monthly counts)
- filters.py (request-boundary validation of list filters)
"""

# Import side-effects are intentionally avoided here; modules are imported by routers as needed.
