"""Force generators that push entities around, and the registry that pairs them."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any

from particlesim.bounding import BoundingBox
from particlesim.entities import Entity, Particle
from particlesim.vector import Vector3

_MASSLESS = 1e-10


def _massless(entity: Entity) -> bool:
    return abs(entity.inv_mass) < _MASSLESS


class ForceGenerator(ABC):
    """A source of force with an optional lifetime.

    A negative ``duration`` means the generator never expires. The generator
    remembers the particle generators that list it, so that it can take itself
    out of their lists when it is discarded.
    """

    def __init__(self, name: str, duration: float = -1e10):
        self.name = name
        self.duration = duration
        self.t = 0.0
        self._owners: list[Any] = []

    @abstractmethod
    def update_force(self, entity: Entity, t: float) -> bool:
        """Apply the force to the entity; return False once the generator has expired."""

    def update_time(self, t: float, accumulate: bool = True) -> bool:
        """Optionally add t to the elapsed time; return whether the generator is still alive."""
        if accumulate:
            self.t += t
        return self.t < self.duration or self.duration < 0.0

    def add_context(self, owner: Any) -> None:
        """Record that the owner's ``force_generators`` list holds this generator."""
        self._owners.append(owner)

    def quit_context(self, owner: Any) -> None:
        """Forget every record of the owner."""
        self._owners = [o for o in self._owners if o is not owner]

    def detach(self) -> None:
        """Remove this generator from the lists of every owner that holds it."""
        for owner in self._owners:
            generators = owner.force_generators
            for index, generator in enumerate(generators):
                if generator is self:
                    del generators[index]
                    break
        self._owners.clear()


class DirectionalForce(ForceGenerator):
    """A constant force applied for a limited time."""

    def __init__(self, force: Vector3, duration: float):
        super().__init__("Direccional", duration)
        self.force = force

    def update_force(self, entity: Entity, t: float) -> bool:
        if not self.update_time(t, False):
            return False
        entity.add_force(self.force)
        return True


class ExplosionGenerator(ForceGenerator):
    """A radial push away from an origin that decays exponentially over time."""

    def __init__(self, origin: Vector3, k: float, radius: float, tau: float, explosion_time: float):
        super().__init__("Explosion", explosion_time)
        self.origin = origin
        self.k = k
        self.radius = radius
        self.tau = tau

    def update_force(self, entity: Entity, t: float) -> bool:
        if not self.update_time(t, False):
            return False
        if _massless(entity):
            return True
        offset = entity.position - self.origin
        dist = offset.magnitude()
        # An entity sitting exactly on the origin has no direction to be pushed in.
        if 0.0 < dist <= self.radius:
            entity.add_force(self.k * offset / dist**2 * math.exp(-self.t / self.tau))
        return True


class GravityForceGenerator(ForceGenerator):
    """Uniform gravitational acceleration, applied as a mass-scaled force."""

    def __init__(self, gravity: Vector3):
        super().__init__("Gravity", -1)
        self.gravity = gravity

    def update_force(self, entity: Entity, t: float) -> bool:
        if self.update_time(t, False) and not _massless(entity):
            entity.add_force(self.gravity * (1.0 / entity.inv_mass))
        return True


class JumpForce(ForceGenerator):
    """A constant force applied for a limited time to entities with mass."""

    def __init__(self, force: Vector3, time: float):
        super().__init__("JUMP", time)
        self.force = force

    def update_force(self, entity: Entity, t: float) -> bool:
        if not self.update_time(t, False):
            return False
        if not _massless(entity):
            entity.add_force(self.force)
        return True


class ParticleDragGenerator(ForceGenerator):
    """Linear and quadratic drag towards a wind velocity, optionally limited to a box."""

    def __init__(self, wind_velocity: Vector3, k1: float, k2: float):
        super().__init__("Drag", -1)
        self.wind_velocity = wind_velocity
        self.k1 = k1
        self.k2 = k2
        self.bounding_box: BoundingBox | None = None

    def set_drag(self, k1: float, k2: float) -> None:
        """Set both drag coefficients."""
        self.k1 = k1
        self.k2 = k2

    def update_force(self, entity: Entity, t: float) -> bool:
        if self.update_time(t):
            if _massless(entity):
                return True
            if self.bounding_box is None or self.bounding_box.contains(entity.position):
                diff = self.wind_velocity - entity.velocity
                entity.add_force(diff * self.k1 + self.k2 * diff * diff.magnitude())
        return True


class SpringForceGenerator(ForceGenerator):
    """Hooke's-law spring pulling an entity towards another entity."""

    def __init__(self, k: float, resting_length: float, other: Entity):
        super().__init__("Muelle", -1)
        self.k = k
        self.resting_length = resting_length
        self.other = other
        self.active = True

    def update_force(self, entity: Entity, t: float) -> bool:
        if self.active:
            relative = self.other.position - entity.position
            length = relative.magnitude()
            delta_x = length - self.resting_length
            entity.add_force(relative.normalized() * delta_x * self.k)
        return True


class ElasticBandForceGenerator(SpringForceGenerator):
    """A spring that only pulls, never pushes: slack when shorter than its rest length."""

    def update_force(self, entity: Entity, t: float) -> bool:
        length = (self.other.position - entity.position).magnitude()
        if length > self.resting_length:
            return super().update_force(entity, t)
        return True


class AnchoredSpringForceGenerator(SpringForceGenerator):
    """A spring whose other end is a fixed anchor particle."""

    def __init__(self, k: float, resting_length: float, anchor_position: Vector3):
        anchor = Particle(Vector3(3, 3, 3), (0.0, 0.0, 0.0, 1.0), -1)
        anchor.position = anchor_position
        super().__init__(k, resting_length, anchor)


class WhirlWindGenerator(ParticleDragGenerator):
    """Drag towards a wind that swirls around a vertical axis through an origin."""

    def __init__(self, k1: float, k2: float, origin: Vector3, whirl_magnitude: float):
        super().__init__(Vector3(), k1, k2)
        self.origin = origin
        self.whirl_magnitude = whirl_magnitude

    def update_force(self, entity: Entity, t: float) -> bool:
        p = entity.position
        o = self.origin
        self.wind_velocity = self.whirl_magnitude * Vector3(
            -(p.z - o.z), (p.y - o.y) / 3, p.x - o.x
        )
        return super().update_force(entity, t)


class ForceRegistry:
    """Pairs of entities and the force generators acting on them."""

    def __init__(self) -> None:
        self._pairs: list[tuple[Entity, ForceGenerator]] = []

    def add_registry(self, force_generator: ForceGenerator, entity: Entity) -> None:
        """Let the generator act on the entity."""
        self._pairs.append((entity, force_generator))

    def update_forces(self, duration: float) -> set[ForceGenerator]:
        """Apply every pair; drop pairs whose generator expired and return those generators."""
        expired: set[ForceGenerator] = set()
        kept: list[tuple[Entity, ForceGenerator]] = []
        for entity, generator in self._pairs:
            if generator.update_force(entity, duration):
                kept.append((entity, generator))
            else:
                expired.add(generator)
        self._pairs = kept
        return expired

    def delete_particle_registry(self, entity: Entity) -> None:
        """Remove every pair that involves the entity."""
        self._pairs = [pair for pair in self._pairs if pair[0] is not entity]

    def clear(self) -> None:
        """Remove every pair."""
        self._pairs.clear()

    def __len__(self) -> int:
        return len(self._pairs)