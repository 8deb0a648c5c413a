from __future__ import annotations
import argparse, sys

def _serve(args) -> int:
    from app.config import IngestConfig
    from app.logging_config import configure_logging
    from main import serve

    cfg = IngestConfig(
        host=args.host,
        port=args.port,
        workers=args.workers,
        queue_capacity=args.queue_size,
        shutdown_grace_sec=args.grace,
        debug=args.debug,
        json_logs=not args.console_logs,
    )
    configure_logging(debug=cfg.debug, json_logs=cfg.json_logs)
    serve(cfg)
    return 0

def replay_file(path: str, workers: int = 3, queue_size: int = 100, quiet: bool = False):
    """
    Push a JSON-lines file through an in-process runtime.
    Returns (accepted, rejected, notified, errors); blank lines are skipped.
    """
    from app.config import IngestConfig
    from app.controller.runtime import IngestRuntime
    from app.notify.sinks import CollectingNotifier, FanoutNotifier, LogNotifier
    from core.errors import DecodeError

    collected = CollectingNotifier()
    notify = collected if quiet else FanoutNotifier(LogNotifier(), collected)
    rt = IngestRuntime(IngestConfig(workers=workers, queue_capacity=queue_size), notify=notify)
    rt.start_workers()

    accepted = rejected = 0
    errors = []
    try:
        with open(path, "rb") as f:
            for lineno, line in enumerate(f, 1):
                if not line.strip():
                    continue
                try:
                    rt.submit(line)
                    accepted += 1
                except DecodeError as e:
                    rejected += 1
                    errors.append(f"line {lineno}: {e}")
    finally:
        rt.shutdown()
    return accepted, rejected, len(collected.events), errors

def _replay(args) -> int:
    from app.logging_config import configure_logging
    configure_logging(debug=args.verbose)

    accepted, rejected, notified, errors = replay_file(
        args.file, workers=args.workers, queue_size=args.queue_size, quiet=args.quiet,
    )
    print("\n=== Replay Summary ===")
    print(f"Accepted : {accepted}")
    print(f"Rejected : {rejected}")
    print(f"Notified : {notified}/{accepted}")
    if errors:
        print("\nRejected lines:")
        for e in errors:
            print(" -", e)
    return 0 if notified == accepted else 2

def main(argv=None):
    ap = argparse.ArgumentParser(prog="ingest", description="Order event ingest CLI")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_serve = sub.add_parser("serve", help="Run the HTTP ingest service")
    p_serve.add_argument("--host", default="0.0.0.0")
    p_serve.add_argument("--port", type=int, default=8080)
    p_serve.add_argument("--workers", type=int, default=3)
    p_serve.add_argument("--queue-size", type=int, default=100)
    p_serve.add_argument("--grace", type=float, default=1.0, help="seconds in-flight requests get on shutdown")
    p_serve.add_argument("--debug", action="store_true")
    p_serve.add_argument("--console-logs", action="store_true", help="human-readable logs instead of JSON")

    p_replay = sub.add_parser("replay", help="Run a JSON-lines file of events through the pipeline")
    p_replay.add_argument("file")
    p_replay.add_argument("--workers", type=int, default=3)
    p_replay.add_argument("--queue-size", type=int, default=100)
    p_replay.add_argument("-q", "--quiet", action="store_true", help="don't log each notified event")
    p_replay.add_argument("-v", "--verbose", action="store_true")

    args = ap.parse_args(argv)
    if args.cmd == "serve":
        sys.exit(_serve(args))
    if args.cmd == "replay":
        sys.exit(_replay(args))

if __name__ == "__main__":
    main()
