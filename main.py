#!/usr/bin/env python3
"""HTTP Top - Entry point"""

import argparse
import sys
import threading

from rich.console import Console
from rich.markup import escape

from httptop import VERSION, Config, Pipeline, Printer, parse_duration, setup_logging
from httptop.patterns import (
    DEFAULT_COALESCE,
    DEFAULT_LOG_FILE,
    DEFAULT_RATE,
    DEFAULT_TRIGGER,
    DEFAULT_WINDOW,
)
from httptop.profiling import Profiler

console = Console()


def duration(text):
    try:
        return parse_duration(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def non_negative_int(text):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer {text!r}")
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return value


def save_profile(profiler):
    try:
        profiler.stop()
    except OSError as e:
        console.print(f"[red]Error:[/] saving CPU profile {escape(profiler.path)}: {escape(str(e))}")
        return
    console.print(f"\n[green]Profile saved to:[/] {escape(profiler.path)}")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="httptop",
        description="HTTP Top - Live traffic monitor for HTTP access logs",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument("-f", "--file", default=DEFAULT_LOG_FILE,
                        help="Name of the log file to watch")
    parser.add_argument("-l", "--log", help="File to log errors to")
    parser.add_argument("-t", "--trigger", type=non_negative_int, default=DEFAULT_TRIGGER,
                        help="Number of hits that constitutes high traffic")
    parser.add_argument("-r", "--rate", type=duration, default=DEFAULT_RATE,
                        help="Time between information summaries (e.g. 10s)")
    parser.add_argument("-w", "--window", type=duration, default=DEFAULT_WINDOW,
                        help="Size of the high traffic window (e.g. 2m)")
    parser.add_argument("--coalesce", type=duration, default=DEFAULT_COALESCE,
                        help="Delay after a file change to batch rapid writes (e.g. 35ms)")
    parser.add_argument("-j", "--json", action="store_true", help="JSON output only")
    parser.add_argument("--cpuprofile", help="Profile CPU usage, save to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug diagnostics")
    parser.add_argument("--version", action="version", version=f"HTTP Top v{VERSION}")

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    config = Config(
        log_file=args.file,
        error_log=args.log,
        trigger=args.trigger,
        rate=args.rate,
        window=args.window,
        coalesce=args.coalesce,
        json_output=args.json,
        verbose=args.verbose,
        cpuprofile=args.cpuprofile,
    )

    try:
        setup_logging(config.error_log, config.verbose)
    except OSError as e:
        console.print(f"[red]Error:[/] opening error log file {escape(config.error_log)}: {escape(str(e))}")
        sys.exit(1)

    profiler = None
    if config.cpuprofile:
        profiler = Profiler(config.cpuprofile)
        try:
            profiler.start()
        except OSError as e:
            console.print(f"[red]Error:[/] opening CPU profile {escape(config.cpuprofile)}: {escape(str(e))}")
            sys.exit(1)

    printer = Printer(console, json_output=config.json_output)
    pipeline = Pipeline(config, printer)

    try:
        pipeline.start()
    except OSError as e:
        console.print(f"[red]Error:[/] watching {escape(config.log_file)}: {escape(str(e))}")
        if profiler is not None:
            save_profile(profiler)
        sys.exit(1)

    printer.welcome()

    try:
        if profiler is not None:
            input()
        else:
            threading.Event().wait()
    except (KeyboardInterrupt, EOFError):
        pass
    finally:
        if profiler is not None:
            save_profile(profiler)


if __name__ == "__main__":
    main()
