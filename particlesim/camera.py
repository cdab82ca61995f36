"""A free-flying camera steered by keys and mouse motion."""

from __future__ import annotations

import math

from particlesim.vector import Vector3

_UP = Vector3(0.0, 1.0, 0.0)


def _rotate(v: Vector3, angle: float, axis: Vector3) -> Vector3:
    """Rotate v by angle radians about axis (Rodrigues' formula)."""
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return v * cos_a + axis.cross(v) * sin_a + axis * (axis.dot(v) * (1.0 - cos_a))


def _quat_from_columns(c0: Vector3, c1: Vector3, c2: Vector3) -> tuple[float, float, float, float]:
    """Quaternion (x, y, z, w) of the rotation matrix with the given columns."""
    if c2.z < 0:
        if c0.x > c1.y:
            t = 1 + c0.x - c1.y - c2.z
            q = (t, c0.y + c1.x, c2.x + c0.z, c1.z - c2.y)
        else:
            t = 1 - c0.x + c1.y - c2.z
            q = (c0.y + c1.x, t, c1.z + c2.y, c2.x - c0.z)
    elif c0.x < -c1.y:
        t = 1 - c0.x - c1.y + c2.z
        q = (c2.x + c0.z, c1.z + c2.y, t, c0.y - c1.x)
    else:
        t = 1 + c0.x + c1.y + c2.z
        q = (c1.z - c2.y, c2.x - c0.z, c0.y - c1.x, t)
    scale = 0.5 / math.sqrt(t)
    return (q[0] * scale, q[1] * scale, q[2] * scale, q[3] * scale)


class Camera:
    """Camera with an eye position and a unit viewing direction."""

    def __init__(self, eye: Vector3, direction: Vector3):
        self.eye = eye
        self.dir = direction.normalized()
        self.mouse_x = 0
        self.mouse_y = 0

    def handle_mouse(self, button: int, state: int, x: int, y: int) -> None:
        """Record where the mouse was pressed."""
        self.mouse_x = x
        self.mouse_y = y

    def handle_key(self, key: str, x: int = 0, y: int = 0, speed: float = 1.0) -> bool:
        """Move with W/A/S/D; return whether the key was handled."""
        side = self.dir.cross(_UP).normalized()
        step = 2.0 * speed
        match key.upper():
            case "W":
                self.eye = self.eye + self.dir * step
            case "S":
                self.eye = self.eye - self.dir * step
            case "A":
                self.eye = self.eye - side * step
            case "D":
                self.eye = self.eye + side * step
            case _:
                return False
        return True

    def handle_analog_move(self, x: float, y: float) -> None:
        """Move sideways by x and forwards by y."""
        side = self.dir.cross(_UP).normalized()
        self.eye = self.eye + self.dir * y + side * x

    def handle_motion(self, x: int, y: int) -> None:
        """Turn the view by the mouse movement, one degree per pixel."""
        dx = self.mouse_x - x
        dy = self.mouse_y - y
        side = self.dir.cross(_UP).normalized()
        direction = _rotate(self.dir, math.pi * dx / 180.0, _UP)
        direction = _rotate(direction, math.pi * dy / 180.0, side)
        self.dir = direction.normalized()
        self.mouse_x = x
        self.mouse_y = y

    def transform(self) -> tuple[Vector3, tuple[float, float, float, float]]:
        """Camera pose as (position, rotation quaternion (x, y, z, w))."""
        side = self.dir.cross(_UP)
        if side.magnitude() < 1e-6:
            return self.eye, (0.0, 0.0, 0.0, 1.0)
        side = side.normalized()
        return self.eye, _quat_from_columns(self.dir.cross(side), side, -self.dir)