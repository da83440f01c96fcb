"""
Planar helpers over normalized landmark points.
"""
from __future__ import annotations
import numpy as np
from moodbook.models import Point2D

def distance(p1: Point2D, p2: Point2D) -> float:
    """Euclidean distance between two points."""
    return float(np.hypot(p2.x - p1.x, p2.y - p1.y))

def vertical_distance(p1: Point2D, p2: Point2D) -> float:
    """Absolute difference of the y-coordinates (x is ignored)."""
    return float(abs(p2.y - p1.y))

def angle_between(p1: Point2D, p2: Point2D) -> float:
    """Angle in degrees of the vector p1 -> p2, in (-180, 180]."""
    dx = p2.x - p1.x
    dy = p2.y - p1.y
    return float(np.degrees(np.arctan2(dy, dx)))
