"""
Prefect flows for the data layer.

Flows:
- dashboard: Load several dashboards concurrently and summarise them

Usage (local):
    python -m devpulse.flows.dashboard

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    prefect deployment run 'dashboard-snapshot/default'
"""
