"""
example_agent.py

Minimal smoke run to verify the package imports and the tick loop executes.
This is not an evaluation harness; it just exercises the interfaces.
"""

from wmagent.config import InferenceConfig
from wmagent.harness.runner import build_agent


def main() -> None:
    cfg = InferenceConfig(latent_dim=8, hidden_dim=16)
    agent, motivation, clock, brain = build_agent(cfg, seed=0, dt=0.1, stages="stub")

    with agent:
        for _ in range(5):
            clock.advance()
            motivation.advance(clock.delta_time)
            action = agent.update_world_model()
            print("action=", action.tolist(), "t=", agent.pipeline.tick_count, "hidden[0]=", agent.pipeline.hidden_state[0])


if __name__ == "__main__":
    main()
