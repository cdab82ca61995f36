# particlesim

A small, dependency-free toolkit for simulating point-mass particles under
forces. Everything runs in plain Python; you advance the simulation yourself
by calling `integrate` with a time step.

## What is in the package

- `particlesim.vector`: `Vector3`, an immutable 3D vector with `+`, `-`,
  scalar `*` and `/`, `magnitude()`, `normalized()`, `dot()` and `cross()`.
- `particlesim.bounding`: `BoundingBox`, an axis-aligned box with
  `from_dimensions()` (a box of a given size centred on the origin),
  `contains()` (borders included) and `translate()`.
- `particlesim.entities`: the abstract `Entity` and the `Particle` point mass.
  A `Particle` is a sphere when given a radius and a box when given a
  `Vector3` size. Forces added with `add_force()` are accumulated and used by
  the next `integrate()` step (semi-implicit Euler with `damping ** t`
  velocity damping), after which the accumulator is cleared. `set_inv_mass()`
  sets the inverse mass; an inverse mass of 0 makes the particle immovable.
  A `life_time` of `-1` means the particle never expires.
- `particlesim.forces`: force generators and the `ForceRegistry` that pairs
  them with entities.
  - `GravityForceGenerator`: uniform gravity, scaled by mass.
  - `ParticleDragGenerator`: linear (`k1`) and quadratic (`k2`) drag towards a
    wind velocity, optionally limited to its `bounding_box`.
  - `WhirlWindGenerator`: drag towards a wind swirling around a vertical axis
    through an origin.
  - `ExplosionGenerator`: a radial push within a radius, decaying as
    `exp(-elapsed / tau)`, for a limited time.
  - `DirectionalForce` and `JumpForce`: constant forces for a limited time
    (`JumpForce` leaves massless entities alone).
  - `SpringForceGenerator`: Hooke's-law spring towards another entity;
    `ElasticBandForceGenerator` only pulls when stretched past its rest
    length; `AnchoredSpringForceGenerator` ties the spring to a fixed point.

  A negative duration means a generator never expires. Expired generators are
  dropped by `ForceRegistry.update_forces()`, which returns them.
- `particlesim.generators`: emitters that clone randomly chosen model
  particles. `GaussianParticleGenerator` draws position, velocity and lifetime
  from normal distributions; `UniformParticleGenerator` draws them from
  uniform ranges. `add_generation_loop()` makes an emitter fire every so many
  seconds, and `max_generation_particles` (`-1` for no limit) caps how many it
  makes. Pass `seed` for reproducible output. Forces added with
  `add_force_generator()` act on every particle the emitter spawns.
- `particlesim.systems`: `ParticleSystem` ties particles, emitters and forces
  together. Each `integrate(t)` applies forces, moves particles, runs due
  emitters and removes particles that outlived their lifetime or left the
  system's bounding box. `len(system)` is the number of live particles.
  `DemoSystem` is a ready-made scene with four fountains (gravity, wind, a
  whirlwind and an explosion fountain); `DemoSystem.explosion()` sets off a
  blast.
- `particlesim.fireworks`: `Firework` particles burst into a smaller
  generation of fireworks when they die, `gen` generations deep.
  `FireworkSystem` launches fireworks of eight colours once a second under
  gravity.
- `particlesim.camera`: `Camera`, a free-look camera that moves with
  W/A/S/D (`handle_key`), turns with mouse motion (`handle_mouse`,
  `handle_motion`) and reports its pose as a position and an `(x, y, z, w)`
  quaternion (`transform`).

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from particlesim.vector import Vector3
from particlesim.bounding import BoundingBox
from particlesim.entities import Particle
from particlesim.forces import GravityForceGenerator
from particlesim.systems import ParticleSystem

system = ParticleSystem(BoundingBox.from_dimensions(Vector3(1000, 1000, 1000)))
ball = Particle(1.0, (0, 0, 1, 1), -1)
ball.set_inv_mass(1.0)
system.add_particle(ball)
system.add_registry(GravityForceGenerator(Vector3(0, -9.8, 0)), ball)

for _ in range(60):
    system.integrate(1 / 60)

print(ball.position, len(system))
```

A ready-made scene:

```python
from particlesim.fireworks import FireworkSystem

fireworks = FireworkSystem(seed=1)
for _ in range(300):
    fireworks.integrate(1 / 60)
print(len(fireworks))
```

## What it does not do

The package only simulates. It has no window, no drawing and no interactive
loop: `Camera` keeps a pose for a viewer to use, but nothing here renders a
scene. There is no rigid-body engine with collisions (particles pass through
each other), no game built on the particles, and no command-line program.