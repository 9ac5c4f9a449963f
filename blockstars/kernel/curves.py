"""
Parametric 3D curves used by the star network.

CubicBezierCurve  : control-polygon curve, passes through its end points only.
CatmullRomCurve   : open centripetal spline through every control point.

Both share arc-length helpers: ``lengths`` samples the curve at a fixed number
of divisions and ``point_at(u)`` maps a length fraction ``u`` back to ``t``.
"""

import numpy as np

ARC_DIVISIONS = 200
TANGENT_DELTA = 1e-4


def _vec3(p):
    v = np.asarray(p, dtype=float).reshape(-1)
    if v.size == 2:
        v = np.append(v, 0.0)
    if v.size != 3:
        raise ValueError(f"expected a 2D or 3D point, got {p!r}")
    return v


class Curve:
    arc_divisions = ARC_DIVISIONS

    def points(self, ts) -> np.ndarray:
        raise NotImplementedError

    def point(self, t: float) -> np.ndarray:
        return self.points(np.array([t], dtype=float))[0]

    def lengths(self, divisions: int = None) -> np.ndarray:
        """Cumulative chord lengths at ``divisions + 1`` evenly spaced ``t``."""
        divisions = divisions or self.arc_divisions
        pts = self.points(np.linspace(0.0, 1.0, divisions + 1))
        steps = np.linalg.norm(np.diff(pts, axis=0), axis=1)
        return np.concatenate(([0.0], np.cumsum(steps)))

    def length(self) -> float:
        return float(self.lengths()[-1])

    def u_to_t(self, us) -> np.ndarray:
        us = np.clip(np.asarray(us, dtype=float), 0.0, 1.0)
        arcs = self.lengths()
        total = arcs[-1]
        if total == 0.0:
            return us
        return np.interp(us * total, arcs, np.linspace(0.0, 1.0, arcs.size))

    def points_at(self, us) -> np.ndarray:
        return self.points(self.u_to_t(us))

    def point_at(self, u: float) -> np.ndarray:
        return self.points_at(np.array([u], dtype=float))[0]

    def tangents(self, ts) -> np.ndarray:
        ts = np.asarray(ts, dtype=float)
        lo = np.clip(ts - TANGENT_DELTA, 0.0, 1.0)
        hi = np.clip(ts + TANGENT_DELTA, 0.0, 1.0)
        d = self.points(hi) - self.points(lo)
        norm = np.linalg.norm(d, axis=1, keepdims=True)
        return np.divide(d, norm, out=np.zeros_like(d), where=norm > 0)

    def tangent(self, t: float) -> np.ndarray:
        return self.tangents(np.array([t], dtype=float))[0]

    def tangents_at(self, us) -> np.ndarray:
        return self.tangents(self.u_to_t(us))

    def tangent_at(self, u: float) -> np.ndarray:
        return self.tangents_at(np.array([u], dtype=float))[0]

    def sample(self, count: int = 50) -> np.ndarray:
        """``count + 1`` points evenly spaced along the curve length."""
        return self.points_at(np.linspace(0.0, 1.0, count + 1))


class CubicBezierCurve(Curve):
    def __init__(self, p0, p1, p2, p3):
        self.control_points = np.stack([_vec3(p) for p in (p0, p1, p2, p3)])

    def points(self, ts) -> np.ndarray:
        t = np.asarray(ts, dtype=float).reshape(-1, 1)
        k = 1.0 - t
        p0, p1, p2, p3 = self.control_points
        return k ** 3 * p0 + 3 * k * k * t * p1 + 3 * k * t * t * p2 + t ** 3 * p3


class CatmullRomCurve(Curve):
    """Open centripetal Catmull-Rom spline (exponent 0.25 on squared distances)."""

    exponent = 0.25

    def __init__(self, points):
        pts = np.stack([_vec3(p) for p in points])
        if len(pts) < 2:
            raise ValueError("Catmull-Rom curve needs at least two points")
        self.control_points = pts

    def _span(self, p0, p1, p2, p3):
        dt0 = np.sum((p1 - p0) ** 2) ** self.exponent
        dt1 = np.sum((p2 - p1) ** 2) ** self.exponent
        dt2 = np.sum((p3 - p2) ** 2) ** self.exponent
        # coincident points would divide by zero below
        if dt1 < 1e-4:
            dt1 = 1.0
        if dt0 < 1e-4:
            dt0 = dt1
        if dt2 < 1e-4:
            dt2 = dt1
        t1 = ((p1 - p0) / dt0 - (p2 - p0) / (dt0 + dt1) + (p2 - p1) / dt1) * dt1
        t2 = ((p2 - p1) / dt1 - (p3 - p1) / (dt1 + dt2) + (p3 - p2) / dt2) * dt1
        c2 = -3 * p1 + 3 * p2 - 2 * t1 - t2
        c3 = 2 * p1 - 2 * p2 + t1 + t2
        return p1, t1, c2, c3

    def _segment(self, index):
        pts = self.control_points
        last = len(pts) - 1
        p0 = pts[index - 1] if index > 0 else 2 * pts[0] - pts[1]
        p3 = pts[index + 2] if index + 2 <= last else 2 * pts[last] - pts[last - 1]
        return self._span(p0, pts[index], pts[index + 1], p3)

    def points(self, ts) -> np.ndarray:
        ts = np.asarray(ts, dtype=float).reshape(-1)
        spans = len(self.control_points) - 1
        scaled = ts * spans
        index = np.minimum(np.floor(scaled).astype(int), spans - 1)
        weight = scaled - index
        out = np.empty((ts.size, 3))
        for seg in np.unique(index):
            mask = index == seg
            c0, c1, c2, c3 = self._segment(int(seg))
            w = weight[mask].reshape(-1, 1)
            out[mask] = c0 + c1 * w + c2 * w ** 2 + c3 * w ** 3
        return out
