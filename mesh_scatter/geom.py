from __future__ import annotations

from dataclasses import dataclass
import math

# Lateral (X) first, then vertical (Z), then depth (Y).
ROTATION_ORDER = "XZY"

Vec3 = tuple[float, float, float]
Mat3 = tuple[Vec3, Vec3, Vec3]


def _rot_x(a: float) -> Mat3:
    c = math.cos(a)
    s = math.sin(a)
    return ((1.0, 0.0, 0.0), (0.0, c, -s), (0.0, s, c))


def _rot_y(a: float) -> Mat3:
    c = math.cos(a)
    s = math.sin(a)
    return ((c, 0.0, s), (0.0, 1.0, 0.0), (-s, 0.0, c))


def _rot_z(a: float) -> Mat3:
    c = math.cos(a)
    s = math.sin(a)
    return ((c, -s, 0.0), (s, c, 0.0), (0.0, 0.0, 1.0))


def matmul3(a: Mat3, b: Mat3) -> Mat3:
    return tuple(
        tuple(a[r][0] * b[0][c] + a[r][1] * b[1][c] + a[r][2] * b[2][c] for c in range(3))
        for r in range(3)
    )


def diag3(v: Vec3) -> Mat3:
    return ((v[0], 0.0, 0.0), (0.0, v[1], 0.0), (0.0, 0.0, v[2]))


@dataclass(frozen=True)
class Transform:
    """Placement of one instance, expressed in Blender's Z-up frame.

    ``rotation`` holds Euler angles in radians about X, Y and Z and is applied
    in ``ROTATION_ORDER`` after ``scale``. ``location`` is the translation and
    is never affected by the rotation or scale.
    """

    location: Vec3 = (0.0, 0.0, 0.0)
    rotation: Vec3 = (0.0, 0.0, 0.0)
    scale: Vec3 = (1.0, 1.0, 1.0)

    def basis(self) -> Mat3:
        rx, ry, rz = self.rotation
        m = matmul3(_rot_x(rx), diag3(self.scale))
        m = matmul3(_rot_z(rz), m)
        return matmul3(_rot_y(ry), m)

    def matrix(self) -> tuple[tuple[float, float, float, float], ...]:
        b = self.basis()
        loc = self.location
        return (
            (b[0][0], b[0][1], b[0][2], float(loc[0])),
            (b[1][0], b[1][1], b[1][2], float(loc[1])),
            (b[2][0], b[2][1], b[2][2], float(loc[2])),
            (0.0, 0.0, 0.0, 1.0),
        )

    def apply(self, point: Vec3) -> Vec3:
        b = self.basis()
        return tuple(
            b[r][0] * point[0] + b[r][1] * point[1] + b[r][2] * point[2] + self.location[r]
            for r in range(3)
        )
