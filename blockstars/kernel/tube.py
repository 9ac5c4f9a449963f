import math
from dataclasses import dataclass

import numpy as np

from .curves import Curve

TUBULAR_SEGMENTS = 100
TUBE_RADIUS = 9.0
RADIAL_SEGMENTS = 3


@dataclass(frozen=True)
class TubeMesh:
    vertices: np.ndarray   # (k, 3)
    normals: np.ndarray    # (k, 3)
    indices: np.ndarray    # (m, 3) triangles

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def face_count(self) -> int:
        return len(self.indices)

    def to_dict(self, decimals: int = 4):
        return {
            "vertices": np.round(self.vertices, decimals).tolist(),
            "normals": np.round(self.normals, decimals).tolist(),
            "indices": self.indices.tolist(),
        }


def _rotate(v, axis, theta):
    # Rodrigues rotation of v about a unit axis
    return (v * math.cos(theta)
            + np.cross(axis, v) * math.sin(theta)
            + axis * np.dot(axis, v) * (1.0 - math.cos(theta)))


def transport_frames(tangents: np.ndarray, closed: bool = False):
    """
    Normals and binormals carried along ``tangents`` by parallel transport.
    The first normal is taken from the world axis least aligned with the
    first tangent, so the frame never starts parallel to the curve.
    """
    count = len(tangents)
    normals = np.zeros((count, 3))
    binormals = np.zeros((count, 3))

    t0 = tangents[0]
    axis = np.zeros(3)
    # ties go to the later axis
    axis[2 - int(np.argmin(np.abs(t0)[::-1]))] = 1.0
    vec = np.cross(t0, axis)
    vec /= np.linalg.norm(vec) or 1.0
    normals[0] = np.cross(t0, vec)
    binormals[0] = np.cross(t0, normals[0])

    for i in range(1, count):
        normals[i] = normals[i - 1]
        vec = np.cross(tangents[i - 1], tangents[i])
        length = np.linalg.norm(vec)
        if length > np.finfo(float).eps:
            theta = math.acos(float(np.clip(np.dot(tangents[i - 1], tangents[i]), -1.0, 1.0)))
            normals[i] = _rotate(normals[i], vec / length, theta)
        binormals[i] = np.cross(tangents[i], normals[i])

    if closed and count > 1:
        # spread the residual twist so the seam lines up
        theta = math.acos(float(np.clip(np.dot(normals[0], normals[-1]), -1.0, 1.0)))
        theta /= count - 1
        if np.dot(tangents[0], np.cross(normals[0], normals[-1])) > 0:
            theta = -theta
        for i in range(1, count):
            normals[i] = _rotate(normals[i], tangents[i], theta * i)
            binormals[i] = np.cross(tangents[i], normals[i])

    return normals, binormals


def extrude_tube(curve: Curve, tubular_segments: int = TUBULAR_SEGMENTS,
                 radius: float = TUBE_RADIUS, radial_segments: int = RADIAL_SEGMENTS,
                 closed: bool = False) -> TubeMesh:
    if tubular_segments < 1 or radial_segments < 3:
        raise ValueError("tube needs >= 1 tubular and >= 3 radial segments")
    if radius <= 0:
        raise ValueError("tube radius must be positive")

    us = np.linspace(0.0, 1.0, tubular_segments + 1)
    centers = curve.points_at(us)
    tangents = curve.tangents_at(us)
    normals, binormals = transport_frames(tangents, closed=closed)

    angles = np.linspace(0.0, 2.0 * math.pi, radial_segments + 1)
    sin = np.sin(angles)[None, :, None]
    cos = -np.cos(angles)[None, :, None]
    ring = cos * normals[:, None, :] + sin * binormals[:, None, :]
    ring_len = np.linalg.norm(ring, axis=2, keepdims=True)
    ring = np.divide(ring, ring_len, out=np.zeros_like(ring), where=ring_len > 0)

    vertices = (centers[:, None, :] + radius * ring).reshape(-1, 3)
    vert_normals = ring.reshape(-1, 3)
    if closed:
        # last ring reuses the first so the surface closes without a seam
        vertices[-(radial_segments + 1):] = vertices[:radial_segments + 1]
        vert_normals[-(radial_segments + 1):] = vert_normals[:radial_segments + 1]

    stride = radial_segments + 1
    j, i = np.meshgrid(np.arange(1, tubular_segments + 1),
                       np.arange(1, radial_segments + 1), indexing="ij")
    a = stride * (j - 1) + (i - 1)
    b = stride * j + (i - 1)
    c = stride * j + i
    d = stride * (j - 1) + i
    faces = np.stack([np.stack([a, b, d], axis=-1), np.stack([b, c, d], axis=-1)], axis=2)

    return TubeMesh(vertices=vertices, normals=vert_normals,
                    indices=faces.reshape(-1, 3).astype(np.int64))
