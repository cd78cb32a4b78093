"""
DTR Quiz CLI - Command-line interface for the quiz engine.

Usage:
    dtrquiz catalog [--catalog FILE] [--answers]   List quiz cases
    dtrquiz validate <catalog_file>                Validate a JSON catalog
    dtrquiz demo [--perfect]                       Play a scripted quiz
    dtrquiz play --classifier module:function      Play with a webcam
    dtrquiz serve [--host H] [--port P]            Run the HTTP API
"""

import argparse
import logging
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="DTR Quiz - Dental tool recognition quiz",
        prog="dtrquiz",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Catalog command
    catalog_parser = subparsers.add_parser("catalog", help="List quiz cases")
    catalog_parser.add_argument("--catalog", help="JSON catalog file (default: built-in)")
    catalog_parser.add_argument("--answers", action="store_true", help="Show expected tools")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a JSON catalog")
    validate_parser.add_argument("catalog_file", help="Path to catalog file")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Play a scripted quiz")
    demo_parser.add_argument("--catalog", help="JSON catalog file (default: built-in)")
    demo_parser.add_argument("--perfect", action="store_true", help="Answer every case correctly")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play with a webcam")
    play_parser.add_argument(
        "--classifier", required=True, help="Classifier as module:function"
    )
    play_parser.add_argument("--camera", type=int, default=None, help="Camera device index")
    play_parser.add_argument("--catalog", help="JSON catalog file (default: built-in)")
    play_parser.add_argument(
        "--pause", type=float, default=3.0, help="Seconds to show feedback before the next case"
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "catalog":
        cmd_catalog(args)
    elif args.command == "validate":
        cmd_validate(args)
    elif args.command == "demo":
        cmd_demo(args)
    elif args.command == "play":
        cmd_play(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def _load_config(args):
    from .config import QuizConfig
    from .errors import ConfigError

    try:
        config = QuizConfig.from_env()
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)
    if getattr(args, "catalog", None):
        config.catalog_path = args.catalog
    if getattr(args, "camera", None) is not None:
        config.camera_index = args.camera
    return config


def _load_catalog(config):
    from .errors import CatalogError
    from .session import resolve_catalog

    try:
        return resolve_catalog(config)
    except CatalogError as e:
        print("Error: invalid catalog")
        for err in e.errors:
            print(f"  - {err}")
        sys.exit(1)


def cmd_catalog(args):
    """List quiz cases."""
    catalog = _load_catalog(_load_config(args))

    print(f"Catalog: {catalog.name}")
    print(f"Tools: {', '.join(catalog.labels)}")
    print(f"Cases: {len(catalog)}")
    for i, case in enumerate(catalog):
        line = f"  {i + 1}. [{case.id}] {case.description}"
        if args.answers:
            line += f" -> {case.expected_answer}"
            if case.harmful_answer:
                line += f" (harmful: {case.harmful_answer})"
        print(line)


def cmd_validate(args):
    """Validate a JSON catalog."""
    from .catalog import load_catalog
    from .errors import CatalogError

    print(f"Validating: {args.catalog_file}")
    try:
        catalog = load_catalog(args.catalog_file)
    except CatalogError as e:
        print("\nErrors:")
        for err in e.errors:
            print(f"  - {err}")
        sys.exit(1)

    print(f"OK: {len(catalog)} case(s), {len(catalog.labels)} tool(s)")
    print(f"Harmful combinations: {len(catalog.harmful_entries)}")


def build_demo_script(catalog, hold_frames: int, perfect: bool = False) -> list:
    """
    One scripted answer per case.

    Unless perfect, the second case gets its harmful tool and the fourth
    a plain wrong one. Each answer is preceded by a few frames of noise.
    """
    script = []
    for index, case in enumerate(catalog):
        answer = case.expected_answer
        if not perfect and index == 1 and case.harmful_answer:
            answer = case.harmful_answer
        elif not perfect and index == 3:
            wrong = [
                label for label in catalog.labels
                if label not in (case.expected_answer, case.harmful_answer)
            ]
            if wrong:
                answer = wrong[0]

        script.append((answer, 0.40))  # too weak to count
        script.append(RuntimeError("camera hiccup"))  # transient failure
        script.extend([(answer, 0.95)] * hold_frames)
    return script


def cmd_demo(args):
    """Play a scripted quiz end to end."""
    from .session import LoggingPresentationSink, NoWaitTicker, SessionManager
    from .vision import ScriptedClassifier

    config = _load_config(args)
    catalog = _load_catalog(config)
    script = build_demo_script(catalog, config.buffer_size, perfect=args.perfect)

    manager = SessionManager(
        config=config,
        catalog=catalog,
        classifier_factory=lambda: ScriptedClassifier(script, labels=catalog.labels),
        presentation=LoggingPresentationSink(),
        ticker=NoWaitTicker(),
    )
    manager.start()

    def on_tick(result):
        if result.outcome is not None:
            manager.next_case()

    ticks = manager.loop.run(max_ticks=len(script) + 1, on_tick=on_tick)
    _print_summary(manager, ticks)


def cmd_play(args):
    """Play with a webcam and a user-supplied classifier."""
    from .errors import StartupError
    from .session import IntervalTicker, LoggingPresentationSink, SessionManager
    from .vision import OpenCVFrameSource, load_classifier

    config = _load_config(args)
    catalog = _load_catalog(config)

    manager = SessionManager(
        config=config,
        catalog=catalog,
        classifier_factory=lambda: load_classifier(args.classifier, labels=catalog.labels),
        source_factory=lambda: OpenCVFrameSource(config.camera_index, config.frame_size),
        presentation=LoggingPresentationSink(),
        ticker=IntervalTicker(config.tick_interval),
    )

    try:
        manager.start()
    except StartupError as e:
        print(f"Failed to start: {e}")
        sys.exit(1)

    pause_ticks = int(args.pause / config.tick_interval) if config.tick_interval > 0 else 0
    waiting = {"ticks": None}

    def on_tick(result):
        # Hold the feedback on screen for a while, then move on
        if result.outcome is not None:
            waiting["ticks"] = 0
        elif waiting["ticks"] is not None:
            waiting["ticks"] += 1
            if waiting["ticks"] >= pause_ticks:
                waiting["ticks"] = None
                manager.next_case()

    try:
        ticks = manager.loop.run(on_tick=on_tick)
    except KeyboardInterrupt:
        manager.loop.stop()
        ticks = manager.loop.ticks
        print("\nStopped.")
    finally:
        if manager.source is not None:
            manager.source.close()
    _print_summary(manager, ticks)


def cmd_serve(args):
    """Run the HTTP API with uvicorn."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install uvicorn")
        sys.exit(1)

    from .api import create_app

    config = _load_config(args)
    _load_catalog(config)
    uvicorn.run(create_app(config=config), host=args.host, port=args.port)


def _print_summary(manager, ticks: int):
    summary = manager.session.summary
    print(f"\nTicks: {ticks}")
    if summary is None:
        state = manager.session.state
        print(f"Quiz not finished: score {state.score}, answered {state.answered}")
        return
    print("Quiz Complete!")
    print(f"Final Score: {summary.score} points")
    print(
        f"Accuracy: {summary.correct_count}/{summary.total_cases} ({summary.percentage}%)"
    )
    print(f"Mistakes: {summary.mistake_count}")


if __name__ == "__main__":
    main()
