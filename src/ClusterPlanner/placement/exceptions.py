"""Custom exceptions for the placement module."""

from __future__ import annotations

from ClusterPlanner.exceptions import ClusterPlannerError


class PlacementError(ClusterPlannerError):
    """Base exception for placement planning failures."""


class ConfigurationError(PlacementError):
    """Raised when the requested intent cannot be satisfied as configured."""


class NotFoundError(PlacementError):
    """Raised when the zone directory cannot resolve a region or AZ."""
