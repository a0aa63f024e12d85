import random

import pytest

from background import (
    ALPHA_MIN,
    ALPHA_SPAN,
    SIZE_MIN,
    SIZE_SPAN,
    SPEED_SPAN,
    BackgroundAnimator,
    Particle,
    SvgSurface,
)


def assert_fresh(particle, width, height):
    assert 0 <= particle.x < width
    assert 0 <= particle.y < height
    assert -SPEED_SPAN / 2 <= particle.speed_x < SPEED_SPAN / 2
    assert -SPEED_SPAN / 2 <= particle.speed_y < SPEED_SPAN / 2
    assert SIZE_MIN <= particle.size < SIZE_MIN + SIZE_SPAN
    assert ALPHA_MIN <= particle.alpha < ALPHA_MIN + ALPHA_SPAN


def test_particles_start_inside_viewport():
    animator = BackgroundAnimator(400, 300, count=150, rng=random.Random(1))

    assert len(animator.particles) == 150
    for particle in animator.particles:
        assert_fresh(particle, 400, 300)


def test_particle_moves_by_velocity():
    particle = Particle(100, 100, random.Random(2))
    particle.x, particle.y = 50.0, 50.0
    particle.speed_x, particle.speed_y = 0.2, -0.1

    particle.update(100, 100)

    assert particle.x == pytest.approx(50.2)
    assert particle.y == pytest.approx(49.9)


@pytest.mark.parametrize("x,y,speed_x,speed_y", [
    (99.9, 50.0, 0.2, 0.0),
    (0.05, 50.0, -0.2, 0.0),
    (50.0, 99.9, 0.0, 0.2),
    (50.0, 0.05, 0.0, -0.2),
])
def test_particle_leaving_viewport_is_reset_in_place(x, y, speed_x, speed_y):
    animator = BackgroundAnimator(100, 100, count=1, rng=random.Random(3))
    particle = animator.particles[0]
    particle.x, particle.y = x, y
    particle.speed_x, particle.speed_y = speed_x, speed_y

    animator.step()

    assert animator.particles[0] is particle
    assert_fresh(particle, 100, 100)
    assert (particle.speed_x, particle.speed_y) != (speed_x, speed_y)


def test_resize_does_not_rescale_positions():
    animator = BackgroundAnimator(400, 300, count=10, rng=random.Random(4))
    before = [(p.x, p.y) for p in animator.particles]

    animator.resize(800, 600)

    assert (animator.width, animator.height) == (800, 600)
    assert [(p.x, p.y) for p in animator.particles] == before


def test_frame_clears_and_draws_every_particle():
    animator = BackgroundAnimator(200, 100, count=25, rng=random.Random(5))
    surface = SvgSurface(200, 100)
    surface.fill_circle(1, 1, 1, "red")

    animator.frame(surface)
    animator.frame(surface)

    assert len(surface.shapes) == 25
    svg = surface.to_svg()
    assert svg.count("<circle") == 25
    assert "rgba(0, 102, 255, " in svg


def test_frame_resizes_surface_to_viewport():
    animator = BackgroundAnimator(200, 100, count=1, rng=random.Random(6))
    surface = SvgSurface(50, 50)

    animator.frame(surface)

    assert (surface.width, surface.height) == (200, 100)
    assert 'viewBox="0 0 200 100"' in surface.to_svg()



def test_frame_advances_each_particle_once():
    animator = BackgroundAnimator(200, 100, count=1, rng=random.Random(8))
    particle = animator.particles[0]
    particle.x, particle.y = 100.0, 50.0
    particle.speed_x, particle.speed_y = 0.1, 0.2
    surface = SvgSurface(200, 100)

    animator.frame(surface)

    assert (particle.x, particle.y) == (pytest.approx(100.1), pytest.approx(50.2))
    assert surface.shapes[0][:2] == (particle.x, particle.y)


def test_animators_keep_separate_pools():
    first = BackgroundAnimator(200, 100, count=3, rng=random.Random(9))
    second = BackgroundAnimator(800, 600, count=3, rng=random.Random(9))
    before = [(p.x, p.y) for p in second.particles]

    first.frame(SvgSurface())

    assert [(p.x, p.y) for p in second.particles] == before
    assert (second.width, second.height) == (800, 600)
