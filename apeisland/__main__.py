"""Entry point for ape island: python -m apeisland [--steps N] [--speed TPS] [--advice TEXT] ..."""

import argparse
import sys
import threading
import time

from .config import load_config
from .logging_config import get_logger, setup_logging
from .simulation import SimulationController


def _read_advice(controller: SimulationController, stop: threading.Event):
    """Feed stdin lines into the controller until EOF or shutdown."""
    for line in sys.stdin:
        if stop.is_set():
            break
        text = line.strip()
        if text:
            controller.submit_advice(text)


def main(argv=None):
    ap = argparse.ArgumentParser(
        prog="apeisland",
        description="An ape learns to survive an island while you give it advice.")
    ap.add_argument("--steps", type=int, default=0, help="Logic steps to run (0 = until interrupted).")
    ap.add_argument("--speed", type=float, default=None, help="Logic steps per second (0 = unpaced).")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--policy", choices=("network", "tabular"), default=None)
    ap.add_argument("--config", type=str, default="apeisland.yaml", help="YAML file of tunables.")
    ap.add_argument("--save", type=str, default=None, help="Save file path.")
    ap.add_argument("--no-autosave", action="store_true", help="Never write the save file.")
    ap.add_argument("--advice", action="append", default=[], help="Advice applied before the first step.")
    ap.add_argument("--interactive", action="store_true", help="Read advice from stdin while running.")
    ap.add_argument("--log-dir", type=str, default="runs")
    args = ap.parse_args(argv)

    config = load_config(args.config)
    if args.policy:
        config.POLICY_KIND = args.policy
    if args.seed is not None:
        config.SEED = args.seed
    speed = config.LOGIC_RATE if args.speed is None else args.speed
    save_path = args.save or config.SAVE_PATH

    setup_logging(args.log_dir)
    logger = get_logger("apeisland.cli")

    print(f"  Ape Island")
    print(f"  Island: {config.GRID_W}x{config.GRID_H}  Policy: {config.POLICY_KIND}  "
          f"Speed: {speed or 'unpaced'}/s")

    controller = SimulationController(
        config, save_path=save_path, autosave=not args.no_autosave)

    for text in args.advice:
        print(f"  You: {text}")
        print(f"  {controller.handle_advice(text).render()}")

    stop = threading.Event()
    if args.interactive:
        print("  Type advice and press enter. Ctrl-C to quit.")
        reader = threading.Thread(target=_read_advice, args=(controller, stop), daemon=True)
        reader.start()

    interval = 1.0 / speed if speed and speed > 0 else 0.0
    tick = 0
    try:
        while args.steps <= 0 or tick < args.steps:
            started = time.monotonic()
            result = controller.step()
            tick = result["tick"]
            for reply in result["replies"]:
                print(f"  {reply.render()}")
            if interval:
                time.sleep(max(0.0, interval - (time.monotonic() - started)))
    except KeyboardInterrupt:
        print()
    finally:
        stop.set()

    # Auto-save on quit
    if not args.no_autosave:
        if controller.save():
            print(f"  State saved to {save_path}")
        else:
            print(f"  Failed to save state to {save_path}")

    status = controller.status()
    logger.info(f"Run finished at step {tick}")
    print(f"  Ape Island ended after {tick} steps: foods={status['foods_eaten']} "
          f"deaths={status['deaths']} epsilon={status['epsilon']:.3f}")


if __name__ == "__main__":
    main()
