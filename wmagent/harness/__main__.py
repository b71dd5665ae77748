"""
Command-line harness: run the world-model agent against synthetic collaborators.

Usage
-----
  python -m wmagent.harness --steps 500 --seed 3 --live
"""

from __future__ import annotations

import argparse
import json
import logging

from .runner import run_task


def main() -> None:
    parser = argparse.ArgumentParser(description="World-model agent harness (synthetic collaborators)")
    parser.add_argument("--steps", type=int, default=200)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--dt", type=float, default=0.1, help="Seconds per tick.")
    parser.add_argument("--latent-dim", type=int, default=32)
    parser.add_argument("--hidden-dim", type=int, default=256)
    parser.add_argument("--perception-dim", type=int, default=8)
    parser.add_argument("--consciousness-dim", type=int, default=4)
    parser.add_argument("--n-actions", type=int, default=2)
    parser.add_argument("--stages", type=str, default="projection", choices=["projection", "stub"])
    parser.add_argument("--no-inference", action="store_true", help="Disable inference (tick is a no-op).")
    parser.add_argument("--log-every", type=int, default=0, help="Emit a JSON tick event every N ticks.")
    parser.add_argument("--live", action="store_true", help="Show a rich live view.")
    parser.add_argument("--fps", type=int, default=20)
    args = parser.parse_args()

    if args.log_every > 0:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    summary = run_task(
        steps=args.steps,
        seed=args.seed,
        dt=args.dt,
        latent_dim=args.latent_dim,
        hidden_dim=args.hidden_dim,
        perception_dim=args.perception_dim,
        consciousness_dim=args.consciousness_dim,
        n_actions=args.n_actions,
        stages=args.stages,
        use_inference=not args.no_inference,
        log_every=args.log_every,
        live=args.live,
        fps=args.fps,
    )
    print(json.dumps(summary, sort_keys=True))


if __name__ == "__main__":
    main()
