"""External data sources.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, constants, error mapping
    ├── models.py         # Dataclasses for API payloads
    └── {feature}.py      # Generators / fetch helpers (one per concept)

``dashboard_api/`` talks to the dashboard backend. ``synthetic/`` produces
stand-in series of the same shapes for when the backend is unavailable.

Adding a new resource kind
--------------------------
1. Add a member to ``schemas.ResourceKind``; its value is the URL segment
   (``/{kind}/{entity}/{period}``) and the cache-key prefix.

2. Add a dataclass and a ``parse_*`` function in ``dashboard_api/models.py``
   and register the kind in ``parse_payload``.

3. Teach ``SyntheticSeriesGenerator.for_resource`` to produce the same shape,
   otherwise the fallback policy has nothing to fall back to.

4. Wire it into a dashboard layout (``fetching/layer.py``) if it belongs on
   one.

5. Add tests in ``tests/test_dashboard_api.py`` and ``tests/test_synthetic.py``.
"""
