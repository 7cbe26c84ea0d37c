"""
Command line walkthrough of the time controller.

Runs play, pause, stop, jump and animate on the asyncio timer and prints
every state change and time stamp (in milliseconds).

    playhead-demo --frame-rate 60 --frames 5
"""
import argparse
import asyncio
import sys
from datetime import timedelta
from typing import List, Optional, TextIO

from playhead.application.settings import TimeControllerSettings, LOG_LEVELS
from playhead.application.time_controller import TimeController
from playhead.domain.time_stamp import TimeStamp
from playhead.domain.transport_state import TransportState
from playhead.utils.message import Log


def build_parser() -> argparse.ArgumentParser:
    defaults = TimeControllerSettings.from_env()
    parser = argparse.ArgumentParser(
        prog="playhead-demo",
        description="Drive a time controller through play, pause, stop, jump and animate.",
    )
    parser.add_argument("--frame-rate", type=float, default=defaults.frame_rate,
                        help="time stamps per second (default: %(default)s)")
    parser.add_argument("--frames", type=int, default=5,
                        help="frames to wait between steps (default: %(default)s)")
    parser.add_argument("--animation-ms", type=int, default=100,
                        help="duration of the animate steps in ms (default: %(default)s)")
    parser.add_argument("--log-level", default=defaults.log_level, choices=LOG_LEVELS,
                        help="package log level (default: %(default)s)")
    return parser


async def run_demo(
    settings: TimeControllerSettings,
    frames: int = 5,
    animation_duration: timedelta = timedelta(milliseconds=100),
    out: Optional[TextIO] = None,
) -> TimeController:
    """
    Run the walkthrough and return the (disposed) controller.

    Output goes to out, or sys.stdout when not given.
    """
    if out is None:
        out = sys.stdout

    def on_time_stamp(time_stamp: TimeStamp):
        out.write(f"    time: {time_stamp.microseconds // 1000}\n")

    def on_state_change(state: TransportState):
        out.write(f"  state: {state.value}\n")

    def step(title: str):
        out.write(f"\n{title}:\n")

    controller = settings.create_controller(on_time_stamp=on_time_stamp)
    controller.state.subscribe(on_state_change)
    wait = controller.frame_duration.total_seconds() * frames

    step("Start playing")
    controller.play()
    await asyncio.sleep(wait)

    step("Pause will also output the last frame")
    controller.pause()
    await asyncio.sleep(wait)

    step("Stop the controller. Time will be set back to 0")
    controller.stop()

    step("Jump to 10s")
    controller.jump_to(10.0)

    step("Now play again")
    controller.play()
    await asyncio.sleep(wait)
    controller.pause()

    step(f"Animate to 20s within {animation_duration.total_seconds() * 1000:g}ms")
    await controller.animate_to(20.0, animation_duration=animation_duration)

    step(f"Animate back to 10s within {animation_duration.total_seconds() * 1000:g}ms")
    await controller.animate_to(10.0, animation_duration=animation_duration)

    controller.dispose()
    return controller


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = TimeControllerSettings(frame_rate=args.frame_rate, log_level=args.log_level)

    result = settings.validate()
    if not result.valid:
        for error in result.errors:
            Log.error(f"playhead-demo: {error}")
        return 2
    if args.frames < 0 or args.animation_ms < 0:
        Log.error("playhead-demo: --frames and --animation-ms must not be negative")
        return 2

    settings.apply_logging()
    asyncio.run(run_demo(
        settings,
        frames=args.frames,
        animation_duration=timedelta(milliseconds=args.animation_ms),
    ))
    return 0


if __name__ == "__main__":
    sys.exit(main())
