"""Fireworks: particles that burst into smaller fireworks when they die."""

from __future__ import annotations

import random

from particlesim.bounding import BoundingBox
from particlesim.forces import GravityForceGenerator
from particlesim.generators import GaussianParticleGenerator
from particlesim.systems import ParticleSystem
from particlesim.entities import Particle
from particlesim.vector import Vector3


class Firework(Particle):
    """A spherical particle that bursts into ``gen`` further generations of fireworks."""

    MEAN_VEL = Vector3(0, 4, 0)
    STD_DEV_VEL = Vector3(4, 3, 4)
    ERASED_TIME = 1.0
    STD_DEV_TIME = 0.2

    def __init__(
        self,
        radius: float,
        color: tuple[float, float, float, float],
        life_time: float,
        gen: int,
        min_particles_generated: int,
        max_particles_generated: int,
        rng: random.Random | None = None,
    ):
        super().__init__(float(radius), color, life_time)
        self.gen = gen
        self.min_particles_generated = min_particles_generated
        self.max_particles_generated = max_particles_generated
        self.rng = rng if rng is not None else random.Random()

    def on_death(self) -> None:
        """Prepare a burst of smaller fireworks, one generation fewer."""
        if self.gen <= 0:
            return
        diff = self.max_particles_generated - self.min_particles_generated
        if diff == 0:
            diff = 1
        count = self.rng.randrange(abs(diff)) + self.min_particles_generated
        burst = GaussianParticleGenerator(
            self.position,
            self.MEAN_VEL,
            self.ERASED_TIME,
            count,
            Vector3(0.1, 0.1, 0.1),
            self.STD_DEV_VEL,
            self.STD_DEV_TIME,
            seed=self.rng.randrange(2**32),
        )
        child = Firework(
            self.size.x * 0.75,
            self.color,
            0,
            self.gen - 1,
            int(self.min_particles_generated * 0.75),
            int(self.max_particles_generated * 0.75),
            self.rng,
        )
        child.damping = 0.99
        burst.add_model_particle(child, "FIREWORK")
        child.set_inv_mass(1)
        child.first_generator = self.first_generator
        if self.first_generator is not None:
            for force_generator in self.first_generator.force_generators:
                burst.add_force_generator(force_generator)
        self.add_generator(burst)

    def clone(self) -> Firework:
        copy = Firework(
            self.size.x,
            self.color,
            self.life_time,
            self.gen,
            self.min_particles_generated,
            self.max_particles_generated,
            self.rng,
        )
        copy.position = self.position
        copy.velocity = self.velocity
        copy.acceleration = self.acceleration
        copy.set_inv_mass(self.inv_mass)
        copy.damping = self.damping
        copy.first_generator = self.first_generator
        return copy


class FireworkSystem(ParticleSystem):
    """A fountain launching fireworks of eight colours once a second, under gravity."""

    def __init__(self, bounding_box: BoundingBox | None = None, seed: int | None = None):
        super().__init__(bounding_box)
        rng = random.Random(seed)
        fountain = GaussianParticleGenerator(
            Vector3(0, 0, 0),
            Vector3(0, 30, 0),
            2,
            1,
            Vector3(0.5, 0.5, 0.5),
            Vector3(5, 5, 5),
            0.5,
            seed=rng.randrange(2**32),
        )
        models = [
            ("FIREWORK_BLUE", 1, (0, 0, 1, 1), 7, 12, 0.99, 7),
            ("FIREWORK_RED", 1, (1, 0, 0, 1), 7, 12, 0.99, 2),
            ("FIREWORK_GREEN", 2, (0, 1, 0, 1), 7, 12, 0.99, 1.0 / 10),
            ("FIREWORK_YELLOW", 1, (1, 1, 0, 1), 7, 12, 0.99, 1),
            ("FIREWORK_CYAN", 1, (0, 1, 1, 1), 7, 12, 0.99, 40),
            ("FIREWORK_PURPLE", 0.5, (1, 0, 1, 1), 12, 17, 0.99, 1.0 / 3),
            ("FIREWORK_WHITE", 1, (1, 1, 1, 1), 7, 12, 0.99, 1.0 / 2),
            ("FIREWORK_BLACK", 1, (0, 0, 0, 1), 7, 12, 0.5, 10),
        ]
        for kind, radius, color, low, high, damping, inv_mass in models:
            model = Firework(radius, color, 0, 3, low, high, rng)
            model.damping = damping
            model.set_inv_mass(inv_mass)
            fountain.add_model_particle(model, kind, True)

        self.add_generator(fountain, "Fuente")
        fountain.add_generation_loop(1)
        self.add_force_to_generator(fountain, GravityForceGenerator(Vector3(0, -9.8, 0)))