"""
Core geometry operations for points on the unit sphere.

Contains utility functions for:
- Latitude/longitude conversion
- Orientation predicates (sign, ordered CCW)
- Edge crossing tests used by point containment

Points are represented as float64 numpy arrays of shape (3,) with unit norm.
"""

from typing import Tuple

import numpy as np


# Machine epsilon for float64, used to size error margins on bounds
DBL_EPSILON = float(np.finfo(np.float64).eps)

# Fixed reference point used to bootstrap point containment. It is chosen to
# be unlikely to lie on any real edge or to coincide with any real vertex.
ORIGIN_POINT = np.array([
    -0.0099994664350250197,
    0.0025924542609324121,
    0.99994664350250195,
])

NORTH_POLE = np.array([0.0, 0.0, 1.0])
SOUTH_POLE = np.array([0.0, 0.0, -1.0])

# Orientation results
CLOCKWISE = -1
INDETERMINATE = 0
COUNTERCLOCKWISE = 1

# Crossing results
DO_NOT_CROSS = -1
MAYBE_CROSS = 0
CROSS = 1


def normalize(v: np.ndarray) -> np.ndarray:
    """
    Scale a vector to unit length.

    The zero vector is returned unchanged.
    """
    v = np.asarray(v, dtype=np.float64)
    n = np.linalg.norm(v)
    if n == 0:
        return v.copy()
    return v / n


def latlng_to_point(lat: float, lng: float) -> np.ndarray:
    """
    Convert a latitude/longitude pair to a unit vector.

    Parameters
    ----------
    lat : float
        Latitude in radians.
    lng : float
        Longitude in radians.

    Returns
    -------
    np.ndarray
        Unit vector of shape (3,).
    """
    cos_lat = np.cos(lat)
    return np.array([cos_lat * np.cos(lng), cos_lat * np.sin(lng), np.sin(lat)])


def point_to_latlng(p: np.ndarray) -> Tuple[float, float]:
    """
    Convert a point to (latitude, longitude) in radians.

    Longitude is in [-pi, pi]; it is 0 at the poles.
    """
    lat = float(np.arctan2(p[2], np.hypot(p[0], p[1])))
    lng = float(np.arctan2(p[1], p[0]))
    return lat, lng


def points_from_degrees(lats, lngs) -> np.ndarray:
    """
    Convert latitude and longitude sequences in degrees to unit vectors.

    Parameters
    ----------
    lats : array-like
        Latitudes in degrees, shape (N,).
    lngs : array-like
        Longitudes in degrees, shape (N,).

    Returns
    -------
    np.ndarray
        Points of shape (N, 3).
    """
    lats = np.radians(np.asarray(lats, dtype=np.float64))
    lngs = np.radians(np.asarray(lngs, dtype=np.float64))

    if lats.ndim != 1 or lats.shape != lngs.shape:
        raise ValueError(
            f"Expected matching 1D latitude/longitude arrays, got {lats.shape} and {lngs.shape}"
        )

    cos_lat = np.cos(lats)
    return np.column_stack([cos_lat * np.cos(lngs), cos_lat * np.sin(lngs), np.sin(lats)])


def points_to_degrees(points: np.ndarray) -> np.ndarray:
    """
    Convert unit vectors to planar (longitude, latitude) coordinates in degrees.

    Parameters
    ----------
    points : np.ndarray
        Points of shape (N, 3).

    Returns
    -------
    np.ndarray
        Array of shape (N, 2) holding [lng, lat] rows, the x/y order used by
        shapely and matplotlib.
    """
    points = np.atleast_2d(points)
    lats = np.degrees(np.arctan2(points[:, 2], np.hypot(points[:, 0], points[:, 1])))
    lngs = np.degrees(np.arctan2(points[:, 1], points[:, 0]))
    return np.column_stack([lngs, lats])


def ortho(p: np.ndarray) -> np.ndarray:
    """
    Return a unit vector orthogonal to p.

    The result is a deterministic function of p, so it can serve as a fixed
    reference direction when ordering edges around a shared vertex.
    """
    ov = np.array([0.012, 0.0053, 0.00457])
    k = int(np.argmax(np.abs(p)))
    if k == 0:
        ov[2] = 1.0
    elif k == 1:
        ov[0] = 1.0
    else:
        ov[1] = 1.0
    return normalize(np.cross(p, ov))


def robust_sign(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> int:
    """
    Orientation of the triangle ABC.

    Returns COUNTERCLOCKWISE (+1) if the points are in CCW order when viewed
    from outside the sphere, CLOCKWISE (-1) if CW, and INDETERMINATE (0) when
    the triple product is exactly zero.
    """
    det = float(np.dot(np.cross(a, b), c))
    if det > 0:
        return COUNTERCLOCKWISE
    if det < 0:
        return CLOCKWISE
    return INDETERMINATE


def ordered_ccw(a: np.ndarray, b: np.ndarray, c: np.ndarray, o: np.ndarray) -> bool:
    """
    Report whether edges OA, OB and OC are encountered in that order while
    sweeping counter-clockwise around O.

    Equivalently, B lies in the CCW wedge from A to C around O. Returns true
    if A == B or B == C, and false if A == C != B.
    """
    total = 0
    if robust_sign(b, o, a) != CLOCKWISE:
        total += 1
    if robust_sign(c, o, b) != CLOCKWISE:
        total += 1
    if robust_sign(a, o, c) == COUNTERCLOCKWISE:
        total += 1
    return total >= 2


def _same(a: np.ndarray, b: np.ndarray) -> bool:
    return bool(np.array_equal(a, b))


def crossing_sign(a: np.ndarray, b: np.ndarray, c: np.ndarray, d: np.ndarray) -> int:
    """
    Test whether edge AB crosses edge CD at a point interior to both.

    Returns
    -------
    int
        CROSS if the edges cross, MAYBE_CROSS if they share a vertex, and
        DO_NOT_CROSS otherwise (including degenerate collinear input).
    """
    if _same(a, c) or _same(a, d) or _same(b, c) or _same(b, d):
        return MAYBE_CROSS

    acb = -robust_sign(a, b, c)
    bda = robust_sign(a, b, d)
    if acb == INDETERMINATE or acb != bda:
        return DO_NOT_CROSS

    cbd = -robust_sign(c, d, b)
    if cbd != acb:
        return DO_NOT_CROSS

    dac = robust_sign(c, d, a)
    if dac != acb:
        return DO_NOT_CROSS

    return CROSS


def vertex_crossing(a: np.ndarray, b: np.ndarray, c: np.ndarray, d: np.ndarray) -> bool:
    """
    Resolve a crossing between edges AB and CD that share a vertex.

    There is a crossing iff edge AB is further CCW around the shared vertex
    than edge CD, measured from the reference direction ortho(vertex).
    """
    if _same(a, b) or _same(c, d):
        return False

    if _same(a, c):
        return _same(b, d) or ordered_ccw(ortho(a), d, b, a)
    if _same(b, d):
        return ordered_ccw(ortho(b), c, a, b)
    if _same(a, d):
        return _same(b, c) or ordered_ccw(ortho(a), c, b, a)
    if _same(b, c):
        return ordered_ccw(ortho(b), d, a, b)
    return False


def edge_or_vertex_crossing(a: np.ndarray, b: np.ndarray, c: np.ndarray, d: np.ndarray) -> bool:
    """
    Crossing test suitable for counting crossing parity.

    Like crossing_sign(), but shared vertices are resolved with
    vertex_crossing() so that a point is counted once per boundary pass.
    """
    crossing = crossing_sign(a, b, c, d)
    if crossing == DO_NOT_CROSS:
        return False
    if crossing == CROSS:
        return True
    return vertex_crossing(a, b, c, d)
