"""Package-wide exception base."""

from __future__ import annotations


class ClusterPlannerError(Exception):
    """Base exception for ClusterPlanner failures."""
