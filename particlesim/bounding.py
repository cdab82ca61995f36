"""Axis-aligned bounding boxes."""

from __future__ import annotations

from dataclasses import dataclass, field

from particlesim.vector import Vector3


@dataclass
class BoundingBox:
    """An axis-aligned box given by its minimum and maximum corners."""

    minimum: Vector3 = field(default_factory=Vector3)
    maximum: Vector3 = field(default_factory=Vector3)

    @classmethod
    def from_dimensions(cls, dimensions: Vector3) -> BoundingBox:
        """Box of the given size centred on the origin."""
        half = dimensions / 2
        return cls(-half, half)

    def contains(self, point: Vector3) -> bool:
        """Whether the point lies inside the box, borders included."""
        return (
            self.minimum.x <= point.x <= self.maximum.x
            and self.minimum.y <= point.y <= self.maximum.y
            and self.minimum.z <= point.z <= self.maximum.z
        )

    def translate(self, movement: Vector3) -> None:
        """Move the box by the given offset."""
        self.minimum = self.minimum + movement
        self.maximum = self.maximum + movement