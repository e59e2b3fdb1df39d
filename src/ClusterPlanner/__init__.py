"""ClusterPlanner package exports."""

from .exceptions import ClusterPlannerError
from .placement import __all__ as _placement_all
from .placement import *  # noqa: F401,F403

__all__ = [
    "ClusterPlannerError",
    *_placement_all,
]
