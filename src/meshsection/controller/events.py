"""
Results of routing a click to one of the point selection tools.
"""
from enum import Enum


class ClickOutcome(str, Enum):
    IGNORED = "ignored"            # tool inactive
    MISSED = "missed"              # ray hit no surface
    POINT_ADDED = "point_added"    # selection still incomplete
    PLANE_SET = "plane_set"        # second point defined a new plane
    PLANE_REJECTED = "plane_rejected"  # degenerate points, selection restarted
    MEASURED = "measured"          # second point produced a measurement
