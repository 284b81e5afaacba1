"""Temporal analytics for squad dashboards."""
