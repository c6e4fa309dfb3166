import argparse
import logging
import sys
from pathlib import Path

from flocksim.sim import FlockSim, FlockParams, SimConfig
from flocksim.scheduler import FrameScheduler
from flocksim.utils import set_seed


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Interactive boids flocking simulation")
    p.add_argument("--headless", action="store_true",
                   help="run without a window and write a GIF + metrics plot")
    p.add_argument("--steps", type=int, default=600, help="frames to simulate in headless mode")
    p.add_argument("--seed", type=int, default=7)
    p.add_argument("--boids", type=int, default=50)
    p.add_argument("--predators", type=int, default=1)
    p.add_argument("--leaders", type=int, default=1)
    p.add_argument("--width", type=float, default=1200.0)
    p.add_argument("--height", type=float, default=800.0)
    p.add_argument("--obstacles", action="store_true", help="start with obstacles and wind on")
    p.add_argument("--with-leaders", action="store_true", help="start with leaders on")
    p.add_argument("--with-predators", action="store_true", help="start with predators on")
    p.add_argument("--out", type=Path, default=Path(__file__).parent / "results")
    p.add_argument("--log-level", default="INFO")
    return p.parse_args(argv)


def setup_logging(level: str):
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    root = logging.getLogger("flocksim")
    root.addHandler(handler)
    root.setLevel(level.upper())
    # matplotlib/PIL are chatty at DEBUG
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level)

    # ---------- Reproducibility ----------
    set_seed(args.seed)

    # ---------- Config ----------
    cfg = SimConfig(
        n_boids=args.boids,
        n_predators=args.predators,
        n_leaders=args.leaders,
        width=args.width,
        height=args.height,
        seed=args.seed,
    )
    params = FlockParams(
        use_obstacles=args.obstacles,
        use_leaders=args.with_leaders,
        use_predators=args.with_predators,
    )

    sim = FlockSim(cfg, params)
    sim.reset()
    scheduler = FrameScheduler(sim)

    if not args.headless:
        from flocksim.viz import LiveView
        LiveView(scheduler).show()
        return

    from flocksim.viz import plot_metrics, render_gif

    args.out.mkdir(parents=True, exist_ok=True)
    print("Running simulation...")
    history = scheduler.run_headless(args.steps)

    gif_path = args.out / "flock.gif"
    metrics_path = args.out / "metrics.png"

    print(f"Rendering GIF -> {gif_path}")
    render_gif(cfg, history, gif_path.as_posix(), every_n=2)

    print(f"Saving metrics plot -> {metrics_path}")
    plot_metrics(cfg, sim.metrics, metrics_path.as_posix())

    print("\nDone.")
    print(f"- GIF:     {gif_path}")
    print(f"- Metrics: {metrics_path}")


if __name__ == "__main__":
    main()
