# render/recorder.py
import logging, shutil, subprocess
from typing import List

from config import RecordConfig, RenderConfig

class RecorderError(RuntimeError):
    """ffmpeg is missing or would not start."""

def ffmpeg_args(render: RenderConfig, record: RecordConfig) -> List[str]:
    return [
        record.ffmpeg, "-y",
        "-f", "rawvideo", "-vcodec", "rawvideo",
        "-s", f"{render.width}x{render.height}",
        "-pix_fmt", "rgba",
        "-r", f"{render.fps:g}",
        "-i", "-",
        "-an",
        "-vcodec", "h264", "-pix_fmt", "yuv420p",
        "-crf", str(record.crf),
        record.output,
    ]

class FfmpegRecorder:
    """Pipes raw RGBA frames into an ffmpeg child process.

    Starting is fatal on failure; writing is best effort. The first broken
    pipe is logged and recording stops for the rest of the run.
    """
    def __init__(self, render: RenderConfig, record: RecordConfig):
        if shutil.which(record.ffmpeg) is None:
            raise RecorderError(f"ffmpeg not found: {record.ffmpeg!r}")
        self.args = ffmpeg_args(render, record)
        try:
            self.proc = subprocess.Popen(self.args, stdin=subprocess.PIPE,
                                         stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        except OSError as e:
            raise RecorderError(f"Failed to start ffmpeg: {e}") from e
        self.active = True
        self.frames = 0
        logging.info("Recording to %s (pid %s)", record.output, self.proc.pid)

    def write(self, frame):
        if not self.active:
            return
        try:
            self.proc.stdin.write(bytes(frame))
            self.frames += 1
        except (BrokenPipeError, OSError) as e:
            logging.warning("ffmpeg pipe failed after %d frames, recording disabled: %s", self.frames, e)
            self.active = False

    def close(self):
        if self.proc.stdin and not self.proc.stdin.closed:
            try:
                self.proc.stdin.close()
            except OSError as e:
                logging.warning("Closing ffmpeg stdin failed: %s", e)
        code = self.proc.wait()
        logging.info("ffmpeg exited with %s after %d frames", code, self.frames)
        return code
