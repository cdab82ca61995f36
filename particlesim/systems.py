"""Particle systems: the containers that integrate particles, forces and generators."""

from __future__ import annotations

import random

from particlesim.bounding import BoundingBox
from particlesim.entities import Entity, Particle
from particlesim.forces import (
    ExplosionGenerator,
    ForceGenerator,
    ForceRegistry,
    GravityForceGenerator,
    ParticleDragGenerator,
    WhirlWindGenerator,
)
from particlesim.generators import GaussianParticleGenerator, ParticleGenerator
from particlesim.vector import Vector3


def _release_generator(generator: ParticleGenerator) -> None:
    """Make the generator's forces forget it, as when the generator is discarded."""
    for force_generator in generator.force_generators:
        force_generator.quit_context(generator)


class ParticleSystem:
    """Owns particles, particle generators and the forces acting on the particles.

    Particles that outlive their ``life_time`` or leave the optional bounding
    box are removed at the end of each step.
    """

    def __init__(self, bounding_box: BoundingBox | None = None):
        self.box = bounding_box
        self.particles: list[Entity] = []
        self.generators: list[ParticleGenerator] = []
        self.force_generators: set[ForceGenerator] = set()
        self.registry = ForceRegistry()
        self._erased: list[Entity] = []
        self._named_generators: dict[str, ParticleGenerator] = {}

    def integrate(self, t: float) -> None:
        """Advance the whole system by t seconds."""
        for force_generator in self.force_generators:
            force_generator.update_time(t)
        for force_generator in self.registry.update_forces(t):
            self.force_generators.discard(force_generator)
            force_generator.detach()

        for particle in self.particles:
            particle.integrate(t)
            expired = particle.life_time != -1 and particle.time > particle.life_time
            outside = self.box is not None and not self.box.contains(particle.position)
            if expired or outside:
                self.push_erased_particle(particle)

        for generator in self.generators:
            if generator.can_generate_particles(t):
                for particle in generator.generate_particles():
                    self.add_particle(particle, generator)

        self.erase_particles()

    def add_particle(self, particle: Entity, generator: ParticleGenerator | None = None) -> None:
        """Add a particle, subjecting it to the forces of the generator that made it."""
        self.particles.insert(0, particle)
        if generator is not None:
            for force_generator in generator.force_generators:
                self.add_registry(force_generator, particle)

    def add_generator(self, generator: ParticleGenerator, name: str) -> None:
        """Add a particle generator under a name."""
        self.generators.insert(0, generator)
        self._named_generators[name] = generator

    def add_registry(self, force_generator: ForceGenerator, particle: Entity) -> None:
        """Let a force act on a particle."""
        self.registry.add_registry(force_generator, particle)
        self.force_generators.add(force_generator)

    def add_force_to_generator(
        self, generator: ParticleGenerator, force_generator: ForceGenerator
    ) -> None:
        """Apply a force to every particle the generator spawns from now on."""
        generator.add_force_generator(force_generator)

    def get_particle_generator(self, name: str) -> ParticleGenerator | None:
        """The generator added under the name, or None."""
        return self._named_generators.get(name)

    def push_erased_particle(self, particle: Entity) -> None:
        """Schedule a particle for removal at the end of the step."""
        self._erased.append(particle)

    def erase_particles(self) -> None:
        """Remove every scheduled particle, letting it spawn its death particles first."""
        while self._erased:
            entity = self._erased.pop()
            entity.on_death()
            if entity.generates_on_death():
                spawned, generator = entity.generate_particles()
                for particle in spawned:
                    self.add_particle(particle, generator)
                _release_generator(generator)
            self.particles = [p for p in self.particles if p is not entity]
            self.registry.delete_particle_registry(entity)

    def set_empty(self) -> None:
        """Discard every particle, force and generator."""
        self.particles.clear()
        for force_generator in self.force_generators:
            force_generator.detach()
        self.force_generators.clear()
        for generator in self.generators:
            _release_generator(generator)
        self.generators.clear()
        self._named_generators.clear()
        self._erased.clear()
        self.registry.clear()

    def __len__(self) -> int:
        return len(self.particles)


class DemoSystem(ParticleSystem):
    """Four fountains showing gravity, wind, a whirlwind and explosions."""

    def __init__(self, bounding_box: BoundingBox | None = None, seed: int | None = None):
        super().__init__(bounding_box)
        rng = random.Random(seed)

        def seeded() -> int:
            return rng.randrange(2**32)

        spread = Vector3(5, 5, 5)
        jitter = Vector3(0.01, 0.01, 0.01)
        self.explosions_generator = GaussianParticleGenerator(
            Vector3(300, 0, 0), Vector3(0, 0, 0), 30, 1, spread, jitter, 1, seed=seeded()
        )
        gravity_fountain = GaussianParticleGenerator(
            Vector3(-150, 0, 0), Vector3(0, 40, 0), 10, 1, spread, jitter, 1, seed=seeded()
        )
        wind_fountain = GaussianParticleGenerator(
            Vector3(0, 0, 0), Vector3(0, 40, 0), 10, 1, spread, jitter, 1, seed=seeded()
        )
        whirl_fountain = GaussianParticleGenerator(
            Vector3(150, 0, 0), Vector3(0, 40, 0), 10, 1, spread, jitter, 1, seed=seeded()
        )

        gravity = GravityForceGenerator(Vector3(0, -9.8, 0))
        for fountain in (gravity_fountain, wind_fountain, whirl_fountain):
            self.add_force_to_generator(fountain, gravity)

        drag = ParticleDragGenerator(Vector3(0, 12, 12), 1, 0)
        box = BoundingBox.from_dimensions(Vector3(200, 100, 200))
        box.translate(Vector3(0, 100, 0))
        drag.bounding_box = box
        self.add_force_to_generator(wind_fountain, drag)

        whirl = WhirlWindGenerator(2, 0, Vector3(170, 0, 0), 1)
        box = BoundingBox.from_dimensions(Vector3(1000, 400, 1000))
        box.translate(Vector3(170, 0, 0))
        whirl.bounding_box = box
        self.add_force_to_generator(whirl_fountain, whirl)

        models = [
            (self.explosions_generator, "BLUE", 1, (0, 0, 1, 1), 0.99, 7),
            (self.explosions_generator, "RED", 1, (1, 0, 0, 1), 0.99, 2),
            (gravity_fountain, "GREEN", 2, (0, 1, 0, 1), 0.99, 1.0 / 10),
            (gravity_fountain, "YELLOW", 1, (1, 1, 0, 1), 0.99, 1),
            (wind_fountain, "CYAN", 1, (0, 1, 1, 1), 0.99, 40),
            (wind_fountain, "PURPLE", 0.5, (1, 0, 1, 1), 0.99, 1.0 / 3),
            (whirl_fountain, "WHITE", 1, (1, 1, 1, 1), 0.99, 1.0 / 2),
            (whirl_fountain, "BLACK", 1, (0, 0, 0, 1), 0.5, 10),
        ]
        for generator, kind, radius, color, damping, inv_mass in models:
            model = Particle(radius, color, 0)
            model.damping = damping
            model.set_inv_mass(inv_mass)
            generator.add_model_particle(model, kind, True)

        self.add_generator(self.explosions_generator, "Explosiones")
        self.add_generator(gravity_fountain, "Gravedad")
        self.add_generator(wind_fountain, "Viento")
        self.add_generator(whirl_fountain, "Torbellino")

        self.explosions_generator.add_generation_loop(0.7)
        gravity_fountain.add_generation_loop(0.1)
        wind_fountain.add_generation_loop(0.1)
        whirl_fountain.add_generation_loop(0.1)

    def explosion(self) -> None:
        """Set off an explosion that pushes every current and future explosion particle."""
        blast = ExplosionGenerator(Vector3(300, 0, 0), 10000, 20, 1000, 1)
        self.add_force_to_generator(self.explosions_generator, blast)
        for particle in self.particles:
            self.add_registry(blast, particle)