# render/particles.py
import math
import random
from dataclasses import dataclass, field
from typing import List, Tuple

from pygame.math import Vector2

from render.canvas import Canvas

GRAVITY = Vector2(0.0, 1.0)   # px / frame^2, +y points down
MIN_BURST, MAX_BURST = 2, 5   # particles per explosion, [min, max)
MAX_SPEED = 15.0              # px / frame

@dataclass
class Particle:
    pos: Vector2
    vel: Vector2
    age: float = 0.0

    def update(self, frame_time: float):
        self.pos += self.vel
        self.vel += GRAVITY
        self.age += frame_time

@dataclass
class ParticleSystem:
    """Droplets thrown up where notes land, plus one-frame splash lines.

    Particles only die by falling through the bottom edge; age is tracked but
    never used for culling.
    """
    width: int
    height: int
    frame_time: float
    slope: float = 0.0
    rng: random.Random = field(default_factory=random.Random)
    color_index: int = 2
    particles: List[Particle] = field(default_factory=list)
    lines: List[Tuple[Vector2, Vector2]] = field(default_factory=list)

    def __len__(self):
        return len(self.particles)

    def update(self):
        for p in self.particles:
            p.update(self.frame_time)
        self.particles = [p for p in self.particles if p.pos.y < self.height]

    def spawn_explosion(self, pos):
        rng = self.rng
        for _ in range(rng.randrange(MIN_BURST, MAX_BURST)):
            angle = -rng.random() * math.pi          # upper half-plane only
            speed = rng.random() * MAX_SPEED
            vel = Vector2(math.cos(angle), math.sin(angle)) * speed
            self.particles.append(Particle(Vector2(pos), vel))

    def landing_point(self, pos) -> Vector2:
        # follow the note's diagonal down to the bottom edge
        rest_y = self.height - pos[1]
        return Vector2(pos[0] + rest_y * self.slope / self.height, self.height)

    def particles_for_note(self, pos):
        end = self.landing_point(pos)
        self.lines.append((Vector2(pos), end))
        self.spawn_explosion(end)

    def draw(self, canvas: Canvas):
        pen = canvas.select_color(self.color_index)
        for p in self.particles:
            nxt = p.pos + p.vel
            control = (p.pos + nxt) / 2 - GRAVITY
            canvas.draw_curve(p.pos, control, nxt, pen)
        for start, end in self.lines:
            canvas.draw_line(start, end, pen)
        self.lines.clear()
