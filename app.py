# app.py
import logging, random, time
from typing import Callable, List, Optional, Sequence

from pygame.math import Vector2

from config import AppConfig
from notes.model import Note
from render.canvas import BlendMode, Canvas
from render.mapping import map_range
from render.particles import ParticleSystem
from timeline.window import Timeline

class App:
    """Fixed-timestep driver: note rain + splash particles -> canvas -> sink.

    Simulated time is ``frame * frame_time`` regardless of how long a frame
    takes to draw; wall-clock pacing only affects when frames are shown.
    """
    def __init__(self, cfg: AppConfig, notes: Sequence[Note], sink, recorder=None,
                 rng: Optional[random.Random] = None,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.perf_counter):
        self.cfg = cfg
        r = cfg.render
        self.frame_time = r.frame_time
        self.canvas = Canvas.from_hex(r.width, r.height, r.palette)
        self.canvas.set_blend_mode(BlendMode.REPLACE)
        self.timeline = Timeline(notes, r.view_seconds)
        if rng is None:
            rng = random.Random(cfg.seed)
        self.particles = ParticleSystem(r.width, r.height, self.frame_time, r.slope,
                                        rng=rng, color_index=r.particle_color)
        self.sink = sink
        self.recorder = recorder
        self._sleep = sleep
        self._clock = clock

        # 狀態
        self.frame = 0
        self.time = 0.0
        self.visible: List[Note] = []
        self.running = False

        if self.timeline.lowest == self.timeline.highest:
            logging.warning("All notes share pitch %d; drawing them in one column", self.timeline.lowest)

    # ---------- Mapping ----------
    def pitch_x(self, pitch: int) -> float:
        r = self.cfg.render
        low, high = self.timeline.lowest, self.timeline.highest
        if low == high:
            return r.width / 2.0
        return map_range(pitch, low, high, r.slope, r.width - r.slope)

    def palette_index(self, pitch: int) -> int:
        low, high = self.timeline.lowest, self.timeline.highest
        if low == high:
            return 0
        return round(map_range(pitch, low, high, 0, len(self.canvas.palette) - 1))

    def pos_for(self, note_time: float, pitch: int) -> Vector2:
        r = self.cfg.render
        y = map_range(note_time - self.time, 0.0, r.view_seconds, r.height, 0.0)
        slope_offset = map_range(y, 0.0, r.height, 0.0, r.slope)
        return Vector2(self.pitch_x(pitch) + slope_offset, y)

    # ---------- Frame ----------
    def update(self):
        self.particles.update()
        self.time = self.frame * self.frame_time
        window = self.timeline.visible_range(self.time)
        self.visible = [self.timeline.notes[i] for i in window]
        for n in self.timeline.due(window, self.time, self.frame_time):
            self.particles.particles_for_note(self.pos_for(n.time, n.pitch))

    def draw(self):
        self.canvas.clear()
        for n in self.visible:
            pen = self.canvas.select_color(self.palette_index(n.pitch))
            prev_pos = self.pos_for(n.time + self.frame_time, n.pitch)
            self.canvas.draw_line(prev_pos, self.pos_for(n.time, n.pitch), pen)
        self.particles.draw(self.canvas)

        if self.recorder is not None:
            self.recorder.write(self.canvas.buffer)
        self.canvas.display(self.sink)

    def step(self):
        self.update()
        self.draw()
        self.frame += 1

    # ---------- Main loop ----------
    def run(self, max_frames: Optional[int] = None):
        if max_frames is None:
            max_frames = self.cfg.max_frames
        self.running = True
        logging.info("Running at %.1f fps, %d notes, view %.2fs",
                     self.cfg.render.fps, len(self.timeline), self.cfg.render.view_seconds)
        while self.running:
            if max_frames is not None and self.frame >= max_frames:
                break
            started = self._clock()
            self.update()
            self.draw()
            if getattr(self.sink, "closed", False):
                logging.info("Sink closed at frame %d", self.frame)
                self.running = False
            if self.cfg.realtime:
                self._sleep(max(0.0, self.frame_time - (self._clock() - started)))
            self.frame += 1
        self.running = False
        return self.frame

    def stop(self):
        self.running = False

    def close(self):
        if self.recorder is not None:
            self.recorder.close()
            self.recorder = None
        if self.sink is not None:
            self.sink.close()
