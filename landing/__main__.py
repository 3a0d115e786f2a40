"""
Command-line entry point.

    python -m landing view
    python -m landing render --output background.mp4
    python -m landing join you@example.com
    python -m landing status
"""

import argparse
import logging
import sys

from .config import LandingConfig
from .errors import LandingError
from .logging_config import setup_logging
from .waitlist.clock import CountdownClock
from .waitlist.form import WaitlistForm
from .waitlist.store import SupabaseWaitlistStore

logger = logging.getLogger("landing")


def _make_form(config: LandingConfig) -> WaitlistForm:
    store = SupabaseWaitlistStore(config.supabase_url, config.supabase_anon_key, table=config.table)
    return WaitlistForm(store, base_count=config.base_count, default_count=config.default_count)


def cmd_view(args, config: LandingConfig) -> int:
    from .renderers.interactive_renderer import main as run_window

    run_window(CountdownClock(config.start_instant), samples=config.samples,
               width=config.width, height=config.height)
    return 0


def cmd_render(args, config: LandingConfig) -> int:
    from .renderers.offline_renderer import OfflineRenderer

    renderer = OfflineRenderer(args.width or config.width, args.height or config.height,
                               samples=config.samples)
    renderer.render_animation(args.output, fps=args.fps or config.fps, duration=args.duration,
                              frames_only=args.frames_only)
    return 0


def cmd_join(args, config: LandingConfig) -> int:
    form = _make_form(config)
    form.set_email(args.email)
    if form.submit():
        print("You're on the waitlist! We'll notify you when we launch.")
        return 0
    print(form.state.error or "Please enter an email address.")
    return 1


def cmd_status(args, config: LandingConfig) -> int:
    form = _make_form(config)
    form.refresh_count()
    print(form.joined_label)
    print("Time since launch preparation started:")
    print(CountdownClock(config.start_instant).elapsed().format())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="landing", description="NO-CORN waitlist landing")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--log-level", help="Override the configured log level")
    parser.add_argument("--log-file", help="Also write logs to this file")
    sub = parser.add_subparsers(dest="command", required=True)

    view = sub.add_parser("view", help="Open the animated background window")
    view.set_defaults(func=cmd_view)

    render = sub.add_parser("render", help="Export the background as video")
    render.add_argument("--output", required=True, help="Output video file")
    render.add_argument("--fps", type=int, help="Frame rate (default: config fps)")
    render.add_argument("--duration", type=float, default=10.0, help="Duration in seconds")
    render.add_argument("--width", type=int, help="Video width")
    render.add_argument("--height", type=int, help="Video height")
    render.add_argument("--frames-only", action="store_true", help="Write PNG frames only")
    render.set_defaults(func=cmd_render)

    join = sub.add_parser("join", help="Add an email to the waitlist")
    join.add_argument("email")
    join.set_defaults(func=cmd_join)

    status = sub.add_parser("status", help="Show signup count and elapsed time")
    status.set_defaults(func=cmd_status)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = LandingConfig.load(args.config)
    except LandingError as e:
        setup_logging(args.log_level or "INFO", args.log_file)
        logger.error("%s", e)
        return 1

    setup_logging(args.log_level or config.log_level, args.log_file)
    try:
        return args.func(args, config)
    except (LandingError, RuntimeError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
