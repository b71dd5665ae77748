import logging
import math

import numpy as np
import pytest

from wmagent.agent import WorldModelAgent
from wmagent.clock import FixedStepClock
from wmagent.config import InferenceConfig
from wmagent.errors import InferenceStageFailure
from wmagent.harness.stubs import make_stub_stages
from wmagent.harness.worlds import RecordingBrain

KNOWN_MOTIVATION = [0.1, 0.9, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.5, 0.5, 0.5]


class FixedSource:
    def __init__(self, perception, motivation, consciousness):
        self.perception = list(perception)
        self.motivation = list(motivation)
        self.consciousness = list(consciousness)
        self.calls = 0

    def get_observation_data(self):
        self.calls += 1
        return self.perception

    def get_motivational_context(self):
        self.calls += 1
        return self.motivation

    def get_consciousness_state(self):
        self.calls += 1
        return self.consciousness


class Switchable:
    def __init__(self, inner):
        self.inner = inner
        self.input_names = inner.input_names
        self.fail = False

    def __call__(self, inputs):
        if self.fail:
            raise RuntimeError("stage down")
        return self.inner(inputs)


def make_cfg(**overrides) -> InferenceConfig:
    return InferenceConfig(latent_dim=32, hidden_dim=256, perception_dim=8, consciousness_dim=4).replace(**overrides)


def make_agent(cfg: InferenceConfig, *, controller=None):
    source = FixedSource(np.arange(8, dtype=float), KNOWN_MOTIVATION, [0.1, 0.2, 0.3, 0.4])
    brain = RecordingBrain()
    clock = FixedStepClock(step=0.02)
    encoder, rnn, default_controller = make_stub_stages(cfg, action=[0.2, 1.7])
    agent = WorldModelAgent(
        cfg,
        perception=source,
        motivation=source,
        consciousness=source,
        brain=brain,
        clock=clock,
        encoder=encoder,
        rnn=rnn,
        controller=controller if controller is not None else default_controller,
    )
    return agent, source, brain, clock


def test_three_ticks_end_to_end() -> None:
    cfg = make_cfg()
    agent, _, brain, clock = make_agent(cfg)
    for _ in range(3):
        clock.advance()
        action = agent.update_world_model()
        assert action.tolist() == [0, 2]
    assert [a.tolist() for a in brain.actions] == [[0, 2]] * 3
    assert np.array_equal(agent.pipeline.hidden_state, np.full(256, 3.0))
    assert len(agent.pipeline.history) == 3
    assert agent.pipeline.history.newest().size == 8 + 12 + 4


def test_context_uses_clock() -> None:
    cfg = make_cfg()
    agent, _, _, clock = make_agent(cfg)
    clock.advance(0.125)
    obs, ctx = agent.current_inputs()
    assert ctx[0] == pytest.approx(math.sin(2.0 * math.pi * 0.125))
    assert ctx[1] == pytest.approx(0.125)
    assert np.allclose(ctx[2:14], KNOWN_MOTIVATION)
    assert np.allclose(obs[8:20], KNOWN_MOTIVATION)


def test_disabled_inference_is_a_no_op() -> None:
    cfg = make_cfg(use_inference=False)
    agent, source, brain, _ = make_agent(cfg)
    assert agent.pipeline is None
    for _ in range(5):
        assert agent.update_world_model() is None
    assert source.calls == 0
    assert brain.actions == []


def test_enabled_inference_requires_stages() -> None:
    source = FixedSource([0.0] * 8, KNOWN_MOTIVATION, [0.0] * 4)
    with pytest.raises(ValueError):
        WorldModelAgent(
            make_cfg(),
            perception=source,
            motivation=source,
            consciousness=source,
            brain=RecordingBrain(),
            clock=FixedStepClock(),
        )


def test_failed_tick_is_skipped_then_recovers(caplog) -> None:
    cfg = make_cfg(max_consecutive_failures=3)
    _, _, controller = make_stub_stages(cfg, action=[0.2, 1.7])
    switch = Switchable(controller)
    agent, _, brain, _ = make_agent(cfg, controller=switch)

    agent.update_world_model()
    hidden = agent.pipeline.hidden_state

    switch.fail = True
    with caplog.at_level(logging.WARNING, logger="wmagent.agent"):
        assert agent.update_world_model() is None
    assert agent.consecutive_failures == 1
    assert "tick skipped" in caplog.text
    assert len(brain.actions) == 1
    assert np.array_equal(agent.pipeline.hidden_state, hidden)

    switch.fail = False
    assert agent.update_world_model().tolist() == [0, 2]
    assert agent.consecutive_failures == 0
    assert len(brain.actions) == 2


def test_repeated_failures_are_surfaced() -> None:
    cfg = make_cfg(max_consecutive_failures=3)
    _, _, controller = make_stub_stages(cfg)
    switch = Switchable(controller)
    switch.fail = True
    agent, _, brain, _ = make_agent(cfg, controller=switch)

    assert agent.update_world_model() is None
    assert agent.update_world_model() is None
    with pytest.raises(InferenceStageFailure) as excinfo:
        agent.update_world_model()
    assert excinfo.value.stage == "controller"
    assert brain.actions == []


def test_tick_alias_and_dispose() -> None:
    cfg = make_cfg()
    with make_agent(cfg)[0] as agent:
        assert agent.tick().tolist() == [0, 2]
    assert agent.pipeline.disposed


def test_reset_clears_recurrent_state() -> None:
    cfg = make_cfg()
    agent, _, _, _ = make_agent(cfg)
    agent.update_world_model()
    agent.reset()
    assert np.array_equal(agent.pipeline.hidden_state, np.zeros(256))
    assert agent.last_action is None
