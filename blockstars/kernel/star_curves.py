"""
StarCurveBuilder: skip-polygon curve networks.

A star is ``n`` vertices on a circle plus a skip triple ``(s1, s2, s3)``.
Starting at vertex 0 the walk emits one cubic through vertices
``i, i+s1, i+s2, i+s3`` (mod n) and moves on to ``i+s2`` until it is back at 0.
Every step yields a Bezier curve on the z=0 plane (extruded as a tube) and a
Catmull-Rom twin on z=-1 through the same vertices.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .curves import CatmullRomCurve, CubicBezierCurve
from .errors import DegenerateTopologyError
from .shuffle_bag import RandomStream
from .tube import RADIAL_SEGMENTS, TUBE_RADIUS, TUBULAR_SEGMENTS, TubeMesh, extrude_tube

log = logging.getLogger(__name__)

MIN_VERTICES = 5
MAX_VERTICES = 20
STAR_RADIUS = 800.0
SMOOTH_Z = -1.0


@dataclass(frozen=True, eq=False)
class StarTopology:
    n: int
    skip: Tuple[int, int, int]
    radius: float
    vertices: np.ndarray

    @staticmethod
    def ring(n: int, skip: Sequence[int], radius: float = STAR_RADIUS) -> "StarTopology":
        if n < 2:
            raise ValueError("a star needs at least two vertices")
        if len(skip) != 3:
            raise ValueError("skip pattern must have three entries")
        ang = 2.0 * math.pi * np.arange(n) / n
        verts = np.stack([radius * np.cos(ang), radius * np.sin(ang)], axis=1)
        verts.setflags(write=False)
        return StarTopology(n=int(n), skip=tuple(int(s) for s in skip),
                            radius=float(radius), vertices=verts)

    def to_dict(self):
        return {"n": self.n, "skip": list(self.skip), "radius": self.radius}


@dataclass(frozen=True)
class CurveSegment:
    indices: Tuple[int, int, int, int]
    curve: object

    def control_points(self):
        return self.curve.control_points


@dataclass(frozen=True)
class CurvePair:
    bezier: CurveSegment
    smooth: CurveSegment

    @property
    def indices(self):
        return self.bezier.indices


def choose_topology(stream: RandomStream, radius: float = STAR_RADIUS) -> StarTopology:
    n = stream.randint(MIN_VERTICES, MAX_VERTICES)
    while True:
        skip = (stream.randint(1, n - 1), stream.randint(1, n - 1), stream.randint(1, n - 1))
        if n % skip[2] != 0:
            break
    return StarTopology.ring(n, skip, radius)


def walk(topology: StarTopology, max_steps: int = None) -> List[Tuple[int, int, int, int]]:
    """Vertex quadruples visited by the skip-walk, first one starting at 0."""
    n = topology.n
    s1, s2, s3 = topology.skip
    limit = n if max_steps is None else max_steps
    steps = []
    i1 = 0
    while True:
        if len(steps) >= limit:
            raise DegenerateTopologyError(
                f"walk n={n} skip={topology.skip} did not close within {limit} steps")
        i3 = (i1 + s2) % n
        steps.append((i1, (i1 + s1) % n, i3, (i1 + s3) % n))
        i1 = i3
        if i1 == 0:
            return steps


def build_curves(topology: StarTopology, max_steps: int = None) -> List[CurvePair]:
    verts = topology.vertices
    pairs = []
    for quad in walk(topology, max_steps):
        flat = [verts[i] for i in quad]
        pairs.append(CurvePair(
            bezier=CurveSegment(quad, CubicBezierCurve(*flat)),
            smooth=CurveSegment(quad, CatmullRomCurve([(x, y, SMOOTH_Z) for x, y in flat])),
        ))
    return pairs


class Star:
    """
    One star instance. Topology and curves are fixed at construction;
    tube meshes are extruded on first request and kept for the instance's life.
    """
    def __init__(self, stream: RandomStream, name: str = "", color: str = "white",
                 position=(0.0, 0.0, 0.0), rotation=(0.0, 0.0, 0.0), scale: float = 1.0,
                 radius: float = STAR_RADIUS):
        topology = choose_topology(stream, radius)
        curves = build_curves(topology)
        log.debug("built star %s n=%d skip=%s segments=%d",
                  name, topology.n, topology.skip, len(curves))
        self.name = name
        self.color = color
        self.position = tuple(float(v) for v in position)
        self.rotation = tuple(float(v) for v in rotation)
        self.scale = float(scale)
        self.seed = stream.seed
        self.topology = topology
        self.curves = curves
        self._tubes = None

    def tubes(self) -> List[TubeMesh]:
        if self._tubes is None:
            self._tubes = [
                extrude_tube(pair.bezier.curve, TUBULAR_SEGMENTS, TUBE_RADIUS, RADIAL_SEGMENTS)
                for pair in self.curves
            ]
        return self._tubes

    def to_dict(self, include_meshes: bool = False):
        d = {
            "name": self.name,
            "color": self.color,
            "position": list(self.position),
            "rotation": list(self.rotation),
            "scale": self.scale,
            "topology": self.topology.to_dict(),
            "segments": [
                {
                    "indices": list(pair.indices),
                    "bezier": pair.bezier.control_points().tolist(),
                    "smooth": pair.smooth.control_points().tolist(),
                }
                for pair in self.curves
            ],
        }
        if include_meshes:
            d["tubes"] = [mesh.to_dict() for mesh in self.tubes()]
        return d
