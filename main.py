# main.py
import sys, os
sys.path.append(os.path.dirname(__file__))  # 確保能找到 config.py

import argparse
import logging, traceback
from typing import List, Optional

from utils.crashlog import setup_crashlog, log_exception, log_dir
from config import AppConfig, RenderConfig, SinkConfig, RecordConfig

def _init_logging(verbose: bool = False):
    logs = log_dir()
    log_path = os.path.join(logs, "app.log")

    if logging.getLogger().handlers:
        return

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        encoding="utf-8"
    )
    try:
        from logging.handlers import RotatingFileHandler
        fh = RotatingFileHandler(log_path, maxBytes=2*1024*1024, backupCount=3, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logging.getLogger().addHandler(fh)
    except OSError as e:
        logging.warning("File logging disabled: %s", e)

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="note-rain", description="Falling-notes rain visualizer")
    ap.add_argument('--verbose', action='store_true')
    sub = ap.add_subparsers(dest='command', required=True)

    play = sub.add_parser('play', help='render a note table')
    play.add_argument('notes', help='JSON note table ([[time, pitch], ...])')
    play.add_argument('--sink', default='mmap', choices=['mmap', 'window', 'none'])
    play.add_argument('--sink-path', default=SinkConfig.path)
    play.add_argument('--record', metavar='OUT', default=None, help='also encode to a video file with ffmpeg')
    play.add_argument('--ffmpeg', default=RecordConfig.ffmpeg)
    play.add_argument('--frames', type=int, default=None, help='stop after N frames')
    play.add_argument('--fps', type=float, default=RenderConfig.fps)
    play.add_argument('--width', type=int, default=RenderConfig.width)
    play.add_argument('--height', type=int, default=RenderConfig.height)
    play.add_argument('--view', type=float, default=RenderConfig.view_seconds)
    play.add_argument('--slope', type=float, default=RenderConfig.slope)
    play.add_argument('--no-realtime', dest='realtime', action='store_false')
    play.add_argument('--seed', type=int, default=None)

    ext = sub.add_parser('extract', help='convert a MIDI file to a note table')
    ext.add_argument('midi')
    ext.add_argument('out')
    return ap

def config_from_args(args) -> AppConfig:
    return AppConfig(
        render=RenderConfig(width=args.width, height=args.height, fps=args.fps,
                            view_seconds=args.view, slope=args.slope),
        sink=SinkConfig(kind=args.sink, path=args.sink_path),
        record=RecordConfig(enabled=args.record is not None, ffmpeg=args.ffmpeg,
                            output=args.record or RecordConfig.output),
        realtime=args.realtime,
        max_frames=args.frames,
        seed=args.seed,
    )

def cmd_play(args) -> int:
    from app import App
    from notes.table import load_note_table
    from render.recorder import FfmpegRecorder
    from render.sink import make_sink

    cfg = config_from_args(args)
    notes = load_note_table(args.notes)
    r = cfg.render
    sink = make_sink(cfg.sink.kind, cfg.sink.path, r.width, r.height)
    recorder = FfmpegRecorder(r, cfg.record) if cfg.record.enabled else None
    app = App(cfg, notes, sink, recorder)
    try:
        frames = app.run()
    except KeyboardInterrupt:
        logging.info("Interrupted at frame %d", app.frame)
        frames = app.frame
    finally:
        app.close()
    logging.info("Rendered %d frames", frames)
    return 0

def cmd_extract(args) -> int:
    from midi.parser import parse_midi_to_note_table
    from notes.table import save_note_table

    notes = parse_midi_to_note_table(args.midi)
    if not notes:
        logging.error("No note-on events in %s", args.midi)
        return 1
    save_note_table(args.out, notes)
    return 0

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_crashlog()
    _init_logging(args.verbose)
    logging.info("應用程式啟動")
    if args.command == 'extract':
        return cmd_extract(args)
    return cmd_play(args)

if __name__ == '__main__':
    try:
        sys.exit(main())
    except Exception as e:
        try:
            log_exception("Top-level exception", e)
        except OSError:
            pass
        logging.error("未捕捉的例外：%s", e, exc_info=True)
        print("程式發生錯誤，請到 logs/ 資料夾看 app.log 與 error-*.txt")
        traceback.print_exc()
        sys.exit(1)
