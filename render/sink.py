# render/sink.py
import fcntl, logging, mmap, os
import pygame

class SinkError(RuntimeError):
    """Presentation sink could not be created, sized or locked."""

class NullSink:
    """Accepts frames of the right size and drops them (headless runs)."""
    closed = False

    def __init__(self, frame_bytes: int):
        self.frame_bytes = frame_bytes
        self.frames = 0

    def present(self, frame):
        _check_size(frame, self.frame_bytes)
        self.frames += 1

    def close(self):
        pass

class MmapSink:
    """Shared memory-mapped file an external viewer reads RGBA frames from.

    The file is created (or truncated to) exactly ``frame_bytes`` and mapped
    once. Each frame is written under an exclusive, non-blocking flock; if
    another writer holds it we fail fast.
    """
    closed = False

    def __init__(self, path: str, frame_bytes: int):
        self.path = path
        self.frame_bytes = frame_bytes
        try:
            self._fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
        except OSError as e:
            raise SinkError(f"Cannot open presentation sink {path!r}: {e}") from e
        try:
            os.ftruncate(self._fd, frame_bytes)
            self._map = mmap.mmap(self._fd, frame_bytes)
        except OSError as e:
            os.close(self._fd)
            raise SinkError(f"Cannot map presentation sink {path!r}: {e}") from e
        logging.info("Presentation sink mapped: %s (%d bytes)", path, frame_bytes)

    def present(self, frame):
        _check_size(frame, self.frame_bytes)
        try:
            fcntl.flock(self._fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError as e:
            raise SinkError(f"Presentation sink {self.path!r} is locked by another writer") from e
        try:
            self._map[:] = frame
        finally:
            fcntl.flock(self._fd, fcntl.LOCK_UN)

    def close(self):
        if self._map is not None:
            self._map.close()
            os.close(self._fd)
            self._map = None

class WindowSink:
    """Shows frames in a pygame window; ``closed`` flips when the user closes it."""
    def __init__(self, width: int, height: int, caption: str = "note rain"):
        pygame.init()
        self.width, self.height = width, height
        self.frame_bytes = width * height * 4
        self.screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption(caption)
        self.closed = False

    def present(self, frame):
        _check_size(frame, self.frame_bytes)
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                self.closed = True
        image = pygame.image.frombuffer(bytes(frame), (self.width, self.height), "RGBA")
        self.screen.blit(image, (0, 0))
        pygame.display.flip()

    def close(self):
        pygame.quit()

def make_sink(kind: str, path: str, width: int, height: int):
    frame_bytes = width * height * 4
    if kind == "mmap":
        return MmapSink(path, frame_bytes)
    if kind == "window":
        return WindowSink(width, height)
    if kind == "none":
        return NullSink(frame_bytes)
    raise SinkError(f"Unknown sink kind: {kind!r}")

def _check_size(frame, expected: int):
    if len(frame) != expected:
        raise SinkError(f"Frame is {len(frame)} bytes, sink expects {expected}")
