# background.py
"""
Decorative particle background.

A fixed pool of drifting points is stepped and redrawn every frame. A point
that leaves the viewport is re-randomized in place, so the pool never grows
or shrinks.
"""
import random

# --- Configuration ---
PARTICLE_COUNT = 150
DEFAULT_WIDTH, DEFAULT_HEIGHT = 1280, 720

SIZE_MIN, SIZE_SPAN = 0.5, 2.0        # px
SPEED_SPAN = 0.5                      # px/frame, centred on 0
ALPHA_MIN, ALPHA_SPAN = 0.05, 0.2
PARTICLE_RGB = (0, 102, 255)


class Particle:
    def __init__(self, width, height, rng=None):
        self.rng = rng or random.Random()
        self.reset(width, height)

    def reset(self, width, height):
        r = self.rng.random
        self.x = r() * width
        self.y = r() * height
        self.size = r() * SIZE_SPAN + SIZE_MIN
        self.speed_x = (r() - 0.5) * SPEED_SPAN
        self.speed_y = (r() - 0.5) * SPEED_SPAN
        self.alpha = r() * ALPHA_SPAN + ALPHA_MIN

    def out_of_bounds(self, width, height):
        return self.x < 0 or self.x > width or self.y < 0 or self.y > height

    def update(self, width, height):
        self.x += self.speed_x
        self.y += self.speed_y
        if self.out_of_bounds(width, height):
            self.reset(width, height)

    def draw(self, surface):
        red, green, blue = PARTICLE_RGB
        surface.fill_circle(self.x, self.y, self.size, f"rgba({red}, {green}, {blue}, {self.alpha})")


class SvgSurface:
    """Drawing surface that records filled circles and renders them as SVG."""

    def __init__(self, width=DEFAULT_WIDTH, height=DEFAULT_HEIGHT):
        self.width = width
        self.height = height
        self.shapes = []

    def resize(self, width, height):
        self.width = width
        self.height = height

    def clear(self):
        self.shapes = []

    def fill_circle(self, x, y, radius, color):
        self.shapes.append((x, y, radius, color))

    def to_svg(self):
        circles = ''.join(
            f'<circle cx="{x:.2f}" cy="{y:.2f}" r="{radius:.2f}" fill="{color}"/>'
            for x, y, radius, color in self.shapes
        )
        return (f'<svg xmlns="http://www.w3.org/2000/svg" width="{self.width}" height="{self.height}" '
                f'viewBox="0 0 {self.width} {self.height}">{circles}</svg>')


class BackgroundAnimator:
    def __init__(self, width=DEFAULT_WIDTH, height=DEFAULT_HEIGHT, count=PARTICLE_COUNT, rng=None):
        self.width = width
        self.height = height
        self.rng = rng or random.Random()
        self.particles = [Particle(width, height, self.rng) for _ in range(count)]

    def resize(self, width, height):
        # positions are not rescaled
        self.width = width
        self.height = height

    def step(self):
        for particle in self.particles:
            particle.update(self.width, self.height)

    def frame(self, surface):
        if (surface.width, surface.height) != (self.width, self.height):
            surface.resize(self.width, self.height)
        surface.clear()
        self.step()
        for particle in self.particles:
            particle.draw(surface)
        return surface
