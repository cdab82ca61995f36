"""Particle generators that spawn clones of model particles."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod

from particlesim.entities import Entity
from particlesim.forces import ForceGenerator
from particlesim.vector import Vector3


class ParticleGenerator(ABC):
    """Spawns copies of its model particles, optionally on a timed loop.

    A ``max_generation_particles`` of -1 means there is no limit.
    """

    def __init__(
        self,
        mean_pos: Vector3,
        mean_vel: Vector3,
        erase_time: float,
        num_particles: int,
        max_generation_particles: int = -1,
        seed: int | None = None,
    ):
        self.mean_pos = mean_pos
        self.mean_vel = mean_vel
        self.erase_time = erase_time
        self.num_particles = num_particles
        self.max_generation_particles = max_generation_particles
        self.particle_models: list[Entity] = []
        self.force_generators: list[ForceGenerator] = []
        self.particle_types: dict[str, int] = {}
        self.rng = random.Random(seed)
        self.generate_loop = False
        self.time = 0.0
        self.loop_time = 0.0
        self.particles_generated = 0
        self.active = True

    def add_model_particle(self, model: Entity, kind: str, is_first_generator: bool = False) -> None:
        """Register a hidden model particle under a type name."""
        self.particle_models.append(model)
        model.set_invisible()
        self.particle_types[kind] = len(self.particle_models) - 1
        if is_first_generator:
            model.first_generator = self

    def add_generation_loop(self, loop_time: float) -> None:
        """Generate particles every ``loop_time`` seconds."""
        self.loop_time = loop_time
        self.generate_loop = True

    def add_force_generator(self, force_generator: ForceGenerator) -> None:
        """Apply the force to every particle this generator spawns."""
        self.force_generators.insert(0, force_generator)
        force_generator.add_context(self)

    def has_loop(self) -> bool:
        """Whether a generation loop is set."""
        return self.generate_loop

    def is_loop_completed(self, t: float) -> bool:
        """Advance the loop timer by t; return True and restart when a loop is complete."""
        self.time += t
        if self.time > self.loop_time:
            self.time = 0.0
            return True
        return False

    @abstractmethod
    def generate_particles(self) -> list[Entity]:
        """Spawn a batch of new particles."""

    def change_position(self, position: Vector3) -> None:
        """Move the point particles are spawned around."""
        self.mean_pos = position

    def can_generate_particles(self, t: float) -> bool:
        """Whether a batch is due now, advancing the loop timer."""
        return (
            self.active
            and self.has_loop()
            and self.is_loop_completed(t)
            and (
                self.max_generation_particles == -1
                or self.particles_generated < self.max_generation_particles
            )
        )

    def _clone_model(self) -> Entity:
        if not self.particle_models:
            raise RuntimeError("generator has no model particles")
        return self.rng.choice(self.particle_models).clone()


class GaussianParticleGenerator(ParticleGenerator):
    """Spawns particles with normally distributed position, velocity and lifetime."""

    def __init__(
        self,
        mean_pos: Vector3,
        mean_vel: Vector3,
        erase_time: float,
        num_particles: int,
        std_dev_pos: Vector3,
        std_dev_vel: Vector3,
        std_dev_time: float,
        max_generation_particles: int = -1,
        seed: int | None = None,
    ):
        super().__init__(mean_pos, mean_vel, erase_time, num_particles, max_generation_particles, seed)
        self.std_dev_pos = std_dev_pos
        self.std_dev_vel = std_dev_vel
        self.std_dev_time = std_dev_time

    def generate_particles(self) -> list[Entity]:
        particles: list[Entity] = []
        gauss = self.rng.gauss
        for _ in range(self.num_particles):
            p = self._clone_model()
            sp, sv = self.std_dev_pos, self.std_dev_vel
            p.position = self.mean_pos + Vector3(gauss(0, sp.x), gauss(0, sp.y), gauss(0, sp.z))
            p.velocity = Vector3(
                gauss(self.mean_vel.x, sv.x),
                gauss(self.mean_vel.y, sv.y),
                gauss(self.mean_vel.z, sv.z),
            )
            p.life_time = gauss(self.erase_time, self.std_dev_time)
            particles.append(p)
            self.particles_generated += 1
        return particles


class UniformParticleGenerator(ParticleGenerator):
    """Spawns particles with uniformly distributed position, velocity and lifetime."""

    def __init__(
        self,
        mean_pos: Vector3,
        mean_vel: Vector3,
        erase_time: float,
        num_particles: int,
        pos_width: Vector3,
        vel_width: Vector3,
        time_width: float,
        max_generation_particles: int = -1,
        seed: int | None = None,
    ):
        super().__init__(mean_pos, mean_vel, erase_time, num_particles, max_generation_particles, seed)
        self.pos_width = pos_width
        self.vel_width = vel_width
        self.time_width = time_width

    def generate_particles(self) -> list[Entity]:
        particles: list[Entity] = []
        uniform = self.rng.uniform
        pw = self.pos_width / 2
        vw = self.vel_width / 2
        tw = self.time_width / 2
        mv = self.mean_vel
        for _ in range(self.num_particles):
            p = self._clone_model()
            p.position = self.mean_pos + Vector3(
                uniform(-pw.x, pw.x), uniform(-pw.y, pw.y), uniform(-pw.z, pw.z)
            )
            p.velocity = Vector3(
                uniform(mv.x - vw.x, mv.x + vw.x),
                uniform(mv.y - vw.y, mv.y + vw.y),
                uniform(mv.z - vw.z, mv.z + vw.z),
            )
            p.life_time = uniform(self.erase_time - tw, self.erase_time + tw)
            particles.append(p)
            self.particles_generated += 1
        return particles