# ========================= config.py =========================
from dataclasses import dataclass, field
from typing import Optional, Tuple

DEFAULT_PALETTE: Tuple[str, ...] = ("#160729", "#171856", "#243771", "#416e8f", "#dbf3f1")

@dataclass
class RenderConfig:
    width: int = 640
    height: int = 480
    fps: float = 30.0
    view_seconds: float = 0.4   # seconds of future notes visible on screen
    slope: float = 30.0         # horizontal drift (px) across the full height
    palette: Tuple[str, ...] = DEFAULT_PALETTE
    particle_color: int = 2

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Canvas size must be positive, got {self.width}x{self.height}")
        if not self.fps > 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if not self.view_seconds > 0:
            raise ValueError(f"view_seconds must be positive, got {self.view_seconds}")

    @property
    def frame_time(self) -> float:
        return 1.0 / self.fps

    @property
    def frame_bytes(self) -> int:
        return self.width * self.height * 4

@dataclass
class SinkConfig:
    kind: str = "mmap"          # mmap | window | none
    path: str = "/tmp/imagesink"

@dataclass
class RecordConfig:
    enabled: bool = False
    ffmpeg: str = "ffmpeg"
    output: str = "video.mp4"
    crf: int = 15

@dataclass
class AppConfig:
    render: RenderConfig = field(default_factory=RenderConfig)
    sink: SinkConfig = field(default_factory=SinkConfig)
    record: RecordConfig = field(default_factory=RecordConfig)
    realtime: bool = True
    max_frames: Optional[int] = None
    seed: Optional[int] = None
