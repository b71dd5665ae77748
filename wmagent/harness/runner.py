"""Harness runner for the world-model agent."""

from __future__ import annotations

from typing import Dict, List, Optional

import numpy as np
from rich.live import Live

from wmagent.agent import WorldModelAgent
from wmagent.clock import FixedStepClock
from wmagent.config import InferenceConfig, MotivationConfig
from wmagent.motivation import MotivationSystem
from .render import render_frame
from .stubs import make_projection_stages, make_stub_stages
from .worlds import DriftingConsciousness, RecordingBrain, SineWavePerception


def build_agent(
    cfg: InferenceConfig,
    *,
    seed: int,
    dt: float,
    stages: str = "projection",
    n_actions: int = 2,
    motivation_cfg: Optional[MotivationConfig] = None,
) -> tuple[WorldModelAgent, MotivationSystem, FixedStepClock, RecordingBrain]:
    """Wire synthetic collaborators and stand-in stages into an agent."""
    clock = FixedStepClock(step=float(dt))
    brain = RecordingBrain()
    motivation = MotivationSystem(motivation_cfg, reward_sink=brain)
    perception = SineWavePerception(cfg.perception_dim, clock, seed=seed)
    consciousness = DriftingConsciousness(cfg.consciousness_dim, seed=seed + 1)
    if stages == "stub":
        encoder, rnn, controller = make_stub_stages(cfg)
    elif stages == "projection":
        encoder, rnn, controller = make_projection_stages(cfg, n_actions=n_actions, seed=seed)
    else:
        raise ValueError(f"unknown stage set {stages!r}")
    agent = WorldModelAgent(
        cfg,
        perception=perception,
        motivation=motivation,
        consciousness=consciousness,
        brain=brain,
        clock=clock,
        encoder=encoder,
        rnn=rnn,
        controller=controller,
    )
    return agent, motivation, clock, brain


def run_task(
    *,
    steps: int,
    seed: int,
    dt: float = 0.1,
    latent_dim: int = 32,
    hidden_dim: int = 256,
    perception_dim: int = 8,
    consciousness_dim: int = 4,
    n_actions: int = 2,
    stages: str = "projection",
    use_inference: bool = True,
    log_every: int = 0,
    live: bool = False,
    fps: int = 20,
) -> Dict[str, float]:
    """Run `steps` ticks and return summary metrics."""
    if steps < 0:
        raise ValueError("steps must be >= 0")
    cfg = InferenceConfig(
        latent_dim=int(latent_dim),
        hidden_dim=int(hidden_dim),
        perception_dim=int(perception_dim),
        consciousness_dim=int(consciousness_dim),
        use_inference=bool(use_inference),
        log_every=int(log_every),
    )
    agent, motivation, clock, brain = build_agent(cfg, seed=seed, dt=dt, stages=stages, n_actions=n_actions)

    hidden_norms: List[float] = []
    skipped = 0

    def _one_step() -> Optional[np.ndarray]:
        nonlocal skipped
        clock.advance()
        motivation.advance(clock.delta_time)
        action = agent.update_world_model()
        if action is None:
            skipped += 1
        if agent.pipeline is not None:
            hidden_norms.append(float(np.linalg.norm(agent.pipeline.hidden_state)))
        return action

    with agent:
        if live:
            with Live(refresh_per_second=max(1, int(fps))) as view:
                for step in range(int(steps)):
                    action = _one_step()
                    view.update(
                        render_frame(
                            step=step + 1,
                            action=None if action is None else action.tolist(),
                            hidden_norms=hidden_norms,
                            motivation=motivation.get_motivational_context(),
                            skipped=skipped,
                        )
                    )
        else:
            for _ in range(int(steps)):
                _one_step()

        history_len = len(agent.pipeline.history) if agent.pipeline is not None else 0

    return {
        "steps": float(steps),
        "actions": float(len(brain.actions)),
        "skipped": float(skipped),
        "history_len": float(history_len),
        "final_hidden_norm": float(hidden_norms[-1]) if hidden_norms else 0.0,
        "total_reward": brain.total_reward,
    }
