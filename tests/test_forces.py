import math

import pytest

from particlesim.bounding import BoundingBox
from particlesim.entities import Particle
from particlesim.forces import (
    AnchoredSpringForceGenerator,
    DirectionalForce,
    ElasticBandForceGenerator,
    ExplosionGenerator,
    ForceRegistry,
    GravityForceGenerator,
    JumpForce,
    ParticleDragGenerator,
    SpringForceGenerator,
    WhirlWindGenerator,
)
from particlesim.vector import Vector3

COLOR = (1.0, 0.0, 0.0, 1.0)


def make_particle(position=Vector3(), inv_mass=1.0):
    p = Particle(1.0, COLOR, -1)
    p.position = position
    p.set_inv_mass(inv_mass)
    return p


def same(a, b):
    return tuple(a) == pytest.approx(tuple(b))


class _Owner:
    def __init__(self):
        self.force_generators = []


def test_update_time_accumulates_and_expires():
    fg = DirectionalForce(Vector3(1, 0, 0), 1.0)
    assert fg.update_time(0.5) is True
    assert fg.t == pytest.approx(0.5)
    assert fg.update_time(0.6) is False


def test_update_time_without_accumulating_keeps_time():
    fg = DirectionalForce(Vector3(1, 0, 0), 1.0)
    fg.update_time(5.0, False)
    assert fg.t == 0.0


def test_negative_duration_never_expires():
    fg = GravityForceGenerator(Vector3(0, -9.8, 0))
    assert fg.update_time(1e9) is True


def test_directional_force_applies_until_expired():
    force = Vector3(-70, 0, 0)
    fg = DirectionalForce(force, 3)
    p = make_particle()
    assert fg.update_force(p, 0.1) is True
    assert same(p.force, force)
    fg.update_time(4)
    p.clear_accum()
    assert fg.update_force(p, 0.1) is False
    assert same(p.force, Vector3())


def test_jump_force_skips_massless_entities():
    force = Vector3(0, 110, 0)
    fg = JumpForce(force, 1.0)
    massless = make_particle(inv_mass=0.0)
    assert fg.update_force(massless, 0.1) is True
    assert same(massless.force, Vector3())
    heavy = make_particle()
    fg.update_force(heavy, 0.1)
    assert same(heavy.force, force)


def test_gravity_with_unit_inverse_mass_equals_acceleration():
    g = Vector3(0, -9.8, 0)
    p = make_particle(inv_mass=1.0)
    assert GravityForceGenerator(g).update_force(p, 0.1) is True
    assert same(p.force, g)


def test_gravity_scales_with_mass():
    g = Vector3(0, -9.8, 0)
    light = make_particle(inv_mass=1.0)
    heavy = make_particle(inv_mass=0.25)
    fg = GravityForceGenerator(g)
    fg.update_force(light, 0.1)
    fg.update_force(heavy, 0.1)
    assert heavy.force.y == pytest.approx(light.force.y * 4)


def test_explosion_pushes_outwards_inside_radius_only():
    origin = Vector3(300, 0, 0)
    fg = ExplosionGenerator(origin, 10000, 20, 1000, 1)
    inside = make_particle(origin + Vector3(5, 0, 0))
    outside = make_particle(origin + Vector3(50, 0, 0))
    assert fg.update_force(inside, 0.1) is True
    assert fg.update_force(outside, 0.1) is True
    assert inside.force.x > 0
    assert inside.force.y == pytest.approx(0.0)
    assert same(outside.force, Vector3())


def test_explosion_decays_with_time():
    origin = Vector3()
    fg = ExplosionGenerator(origin, 100, 20, 1, 10)
    early = make_particle(Vector3(0, 2, 0))
    fg.update_force(early, 0.1)
    fg.update_time(1.0)
    late = make_particle(Vector3(0, 2, 0))
    fg.update_force(late, 0.1)
    assert late.force.y == pytest.approx(early.force.y * math.exp(-1.0))


def test_explosion_expires():
    fg = ExplosionGenerator(Vector3(), 100, 20, 1, 1)
    fg.update_time(2)
    assert fg.update_force(make_particle(Vector3(1, 0, 0)), 0.1) is False


def test_drag_towards_wind_from_rest():
    wind = Vector3(0, 12, 12)
    fg = ParticleDragGenerator(wind, 1, 0)
    p = make_particle()
    assert fg.update_force(p, 0.1) is True
    assert tuple(p.force) == pytest.approx((0.0, 12.0, 12.0))


def test_drag_zero_when_moving_with_wind():
    wind = Vector3(3, 0, 0)
    fg = ParticleDragGenerator(wind, 2, 5)
    p = make_particle()
    p.velocity = wind
    assert fg.update_force(p, 0.1) is True
    assert tuple(p.force) == pytest.approx((0.0, 0.0, 0.0))


def test_drag_outside_bounding_box_has_no_effect():
    fg = ParticleDragGenerator(Vector3(0, 12, 12), 1, 0)
    box = BoundingBox.from_dimensions(Vector3(200, 100, 200))
    box.translate(Vector3(0, 100, 0))
    fg.bounding_box = box
    p = make_particle(Vector3(0, -10, 0))
    assert fg.update_force(p, 0.1) is True
    assert tuple(p.force) == pytest.approx((0.0, 0.0, 0.0))


def test_drag_accumulates_its_own_time_and_set_drag():
    fg = ParticleDragGenerator(Vector3(), 1, 0)
    fg.update_force(make_particle(), 0.25)
    fg.update_force(make_particle(), 0.25)
    assert fg.t == pytest.approx(0.5)
    fg.set_drag(3, 4)
    assert (fg.k1, fg.k2) == (3, 4)


def test_spring_at_rest_length_exerts_nothing():
    other = make_particle(Vector3(10, 0, 0))
    fg = SpringForceGenerator(3, 10, other)
    p = make_particle()
    assert fg.update_force(p, 0.1) is True
    assert same(p.force, Vector3())


def test_spring_pulls_when_stretched_and_pushes_when_compressed():
    other = make_particle(Vector3(10, 0, 0))
    stretched = SpringForceGenerator(2, 4, other)
    compressed = SpringForceGenerator(2, 40, other)
    a = make_particle()
    b = make_particle()
    stretched.update_force(a, 0.1)
    compressed.update_force(b, 0.1)
    assert a.force.x > 0
    assert b.force.x < 0


def test_inactive_spring_exerts_nothing():
    fg = SpringForceGenerator(2, 4, make_particle(Vector3(10, 0, 0)))
    fg.active = False
    p = make_particle()
    assert fg.update_force(p, 0.1) is True
    assert tuple(p.force) == pytest.approx((0.0, 0.0, 0.0))


def test_elastic_band_is_slack_when_short():
    other = make_particle(Vector3(5, 0, 0))
    fg = ElasticBandForceGenerator(3, 10, other)
    p = make_particle()
    assert fg.update_force(p, 0.1) is True
    assert same(p.force, Vector3())


def test_elastic_band_matches_spring_when_stretched():
    other = make_particle(Vector3(20, 0, 0))
    band = ElasticBandForceGenerator(3, 10, other)
    spring = SpringForceGenerator(3, 10, other)
    a = make_particle()
    b = make_particle()
    band.update_force(a, 0.1)
    spring.update_force(b, 0.1)
    assert same(a.force, b.force)
    assert a.force.x > 0


def test_anchored_spring_anchor_at_given_position():
    anchor = Vector3(200, 20, 0)
    fg = AnchoredSpringForceGenerator(1, 20, anchor)
    assert fg.other.position == anchor
    p = make_particle(Vector3(200, 20 - 20, 0))
    fg.update_force(p, 0.1)
    assert same(p.force, Vector3())


def test_whirlwind_is_horizontal_and_tangential_at_origin_height():
    origin = Vector3(170, 0, 0)
    fg = WhirlWindGenerator(2, 0, origin, 1)
    p = make_particle(origin + Vector3(3, 0, 4))
    fg.update_force(p, 0.1)
    assert p.force.y == pytest.approx(0.0)
    assert p.force.dot(p.position - origin) == pytest.approx(0.0)
    assert p.force.magnitude() > 0


def test_context_detach_removes_from_owners():
    fg = GravityForceGenerator(Vector3(0, -1, 0))
    first, second = _Owner(), _Owner()
    for owner in (first, second):
        owner.force_generators.insert(0, fg)
        fg.add_context(owner)
    fg.quit_context(second)
    fg.detach()
    assert first.force_generators == []
    assert second.force_generators == [fg]


def test_registry_drops_expired_generators():
    registry = ForceRegistry()
    p = make_particle()
    gravity = GravityForceGenerator(Vector3(0, -1, 0))
    push = DirectionalForce(Vector3(1, 0, 0), 1)
    registry.add_registry(gravity, p)
    registry.add_registry(push, p)
    assert registry.update_forces(0.1) == set()
    assert len(registry) == 2
    push.update_time(2)
    assert registry.update_forces(0.1) == {push}
    assert len(registry) == 1


def test_registry_delete_particle_and_clear():
    registry = ForceRegistry()
    a, b = make_particle(), make_particle()
    gravity = GravityForceGenerator(Vector3(0, -1, 0))
    registry.add_registry(gravity, a)
    registry.add_registry(gravity, b)
    registry.add_registry(DirectionalForce(Vector3(1, 0, 0), 1), a)
    registry.delete_particle_registry(a)
    assert len(registry) == 1
    registry.update_forces(0.1)
    assert same(a.force, Vector3())
    assert same(b.force, Vector3(0, -1, 0))
    registry.clear()
    assert len(registry) == 0