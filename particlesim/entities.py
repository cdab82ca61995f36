"""Simulated entities: the abstract entity and the point-mass particle."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any

from particlesim.vector import Vector3


class Entity(ABC):
    """Base of everything a particle system moves and integrates.

    A ``life_time`` of -1 means the entity never expires.
    """

    position: Vector3
    velocity: Vector3
    acceleration: Vector3
    inv_mass: float

    def __init__(self, size: Vector3, color: tuple[float, float, float, float], life_time: float):
        self.size = size
        self.color = tuple(color)
        self.life_time = life_time
        self.time = 0.0
        self.force = Vector3()
        self.volume = 0.0
        self.density = 0.0
        self.visible = True
        self.dead = False
        self.generator: Any = None
        self.first_generator: Any = None

    def integrate(self, t: float) -> None:
        """Advance the entity's age and clear the force accumulator."""
        self.time += t
        self.clear_accum()

    def set_inv_mass(self, inv_mass: float) -> None:
        """Set the inverse mass; the base class derives the density from it."""
        self.density = 1.0 / inv_mass / self.volume if inv_mass != 0 else 0.0

    def set_invisible(self) -> None:
        """Stop the entity from being drawn."""
        self.visible = False

    def add_generator(self, generator: Any) -> None:
        """Attach a generator that spawns particles when the entity dies."""
        self.generator = generator

    def generates_on_death(self) -> bool:
        """Whether a death generator is attached."""
        return self.generator is not None

    def generate_particles(self) -> tuple[list[Entity], Any]:
        """Spawn particles from the death generator at the entity's position."""
        if self.generator is None:
            raise RuntimeError("entity has no generator attached")
        self.generator.change_position(self.position)
        return self.generator.generate_particles(), self.generator

    def on_death(self) -> None:
        """Mark the entity as dead; run when it is removed from its system."""
        self.dead = True

    @abstractmethod
    def add_force(self, force: Vector3) -> None:
        """Accumulate a force for the next integration step."""

    def clear_accum(self) -> None:
        """Reset the force accumulator."""
        self.force = Vector3()

    @abstractmethod
    def clone(self) -> Entity:
        """Return an independent copy of the entity."""


class Particle(Entity):
    """A point mass drawn as a sphere (given a radius) or a box (given a size)."""

    def __init__(
        self,
        shape: float | Vector3,
        color: tuple[float, float, float, float],
        life_time: float,
    ):
        if isinstance(shape, Vector3):
            super().__init__(shape, color, life_time)
            self.sphere = False
            self.volume = shape.x * shape.y * shape.z
        else:
            radius = float(shape)
            super().__init__(Vector3(radius, radius, radius), color, life_time)
            self.sphere = True
            self.volume = 4.0 / 3.0 * math.pi * radius**3
        self.position = Vector3()
        self.velocity = Vector3()
        self.acceleration = Vector3()
        self.damping = 1.0
        self.inv_mass = 0.0

    def integrate(self, t: float) -> None:
        """Semi-implicit Euler step with exponential damping."""
        self.acceleration = self.force * self.inv_mass
        self.velocity = self.velocity + self.acceleration * t
        self.velocity = self.velocity * self.damping**t
        self.position = self.position + self.velocity * t
        super().integrate(t)

    def set_inv_mass(self, inv_mass: float) -> None:
        self.inv_mass = inv_mass
        super().set_inv_mass(inv_mass)

    def add_force(self, force: Vector3) -> None:
        self.force = self.force + force

    def clone(self) -> Particle:
        copy = Particle(self.size.x if self.sphere else self.size, self.color, self.life_time)
        copy.position = self.position
        copy.velocity = self.velocity
        copy.acceleration = self.acceleration
        copy.set_inv_mass(self.inv_mass)
        copy.damping = self.damping
        copy.first_generator = self.first_generator
        return copy