import logging

import pytest

from config import RecordConfig, RenderConfig
from render import recorder as rec
from render.recorder import FfmpegRecorder, RecorderError, ffmpeg_args

class FakePipe:
    def __init__(self, fail_after=None):
        self.chunks = []
        self.closed = False
        self.fail_after = fail_after

    def write(self, data):
        if self.fail_after is not None and len(self.chunks) >= self.fail_after:
            raise BrokenPipeError(32, "Broken pipe")
        self.chunks.append(data)

    def close(self):
        self.closed = True

class FakePopen:
    fail_after = None
    launched = []

    def __init__(self, args, stdin=None, stdout=None, stderr=None):
        self.args = args
        self.stdin = FakePipe(self.fail_after)
        self.pid = 4242
        FakePopen.launched.append(self)

    def wait(self):
        return 0

@pytest.fixture
def fake_ffmpeg(monkeypatch):
    FakePopen.launched = []
    FakePopen.fail_after = None
    monkeypatch.setattr(rec.shutil, "which", lambda name: "/usr/bin/" + name)
    monkeypatch.setattr(rec.subprocess, "Popen", FakePopen)
    return FakePopen

def test_args_describe_raw_rgba_stream():
    args = ffmpeg_args(RenderConfig(), RecordConfig(output="out.mp4"))
    assert args[0] == "ffmpeg"
    assert args[args.index("-s") + 1] == "640x480"
    assert args[args.index("-r") + 1] == "30"
    assert args[args.index("-i") + 1] == "-"
    assert "rgba" in args and "yuv420p" in args
    assert args[args.index("-crf") + 1] == "15"
    assert args[-1] == "out.mp4"

def test_missing_binary_is_fatal():
    with pytest.raises(RecorderError):
        FfmpegRecorder(RenderConfig(), RecordConfig(ffmpeg="no-such-encoder-binary-xyz"))

def test_launch_failure_is_fatal(monkeypatch):
    def boom(*a, **kw):
        raise OSError("exec format error")
    monkeypatch.setattr(rec.shutil, "which", lambda name: "/usr/bin/" + name)
    monkeypatch.setattr(rec.subprocess, "Popen", boom)
    with pytest.raises(RecorderError):
        FfmpegRecorder(RenderConfig(), RecordConfig())

def test_frames_are_piped(fake_ffmpeg):
    r = FfmpegRecorder(RenderConfig(width=2, height=2), RecordConfig())
    r.write(bytearray(16))
    r.write(bytearray(b"\x01" * 16))
    proc = fake_ffmpeg.launched[0]
    assert proc.stdin.chunks == [bytes(16), b"\x01" * 16]
    assert r.close() == 0
    assert proc.stdin.closed

def test_broken_pipe_disables_recording(fake_ffmpeg, caplog):
    fake_ffmpeg.fail_after = 1
    r = FfmpegRecorder(RenderConfig(width=2, height=2), RecordConfig())
    with caplog.at_level(logging.WARNING):
        r.write(bytes(16))
        r.write(bytes(16))
        r.write(bytes(16))
    assert r.active is False
    assert r.frames == 1
    assert sum("recording disabled" in m for m in caplog.messages) == 1
