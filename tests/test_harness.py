import json
import logging
import math

import numpy as np

from wmagent import logging as wm_logging
from wmagent.harness.render import render_frame, sparkline
from wmagent.harness.runner import run_task


def test_run_task_projection_stages() -> None:
    summary = run_task(steps=15, seed=0, latent_dim=8, hidden_dim=16)
    assert summary["actions"] == 15.0
    assert summary["skipped"] == 0.0
    assert summary["history_len"] == 10.0
    assert np.isfinite(summary["final_hidden_norm"])


def test_run_task_stub_stages_hidden_grows_linearly() -> None:
    summary = run_task(steps=15, seed=1, latent_dim=8, hidden_dim=16, stages="stub")
    assert summary["final_hidden_norm"] == math.sqrt(16 * 15.0 ** 2)


def test_run_task_without_inference() -> None:
    summary = run_task(steps=5, seed=0, use_inference=False)
    assert summary["actions"] == 0.0
    assert summary["skipped"] == 5.0
    assert summary["history_len"] == 0.0


def test_tick_events_are_json(caplog) -> None:
    handler = logging.NullHandler()
    wm_logging.TICK_LOGGER.addHandler(handler)
    try:
        with caplog.at_level(logging.INFO, logger="wmagent.pipeline"):
            run_task(steps=4, seed=0, latent_dim=4, hidden_dim=8, stages="stub", log_every=2)
    finally:
        wm_logging.TICK_LOGGER.removeHandler(handler)
    events = [json.loads(r.getMessage()) for r in caplog.records if r.name == "wmagent.pipeline"]
    assert [e["tick"] for e in events] == [2, 4]
    assert all(e["event"] == "tick" and e["action"] == [0, 2] for e in events)


def test_render_frame_builds() -> None:
    frame = render_frame(step=3, action=[0, 1], hidden_norms=[0.0, 1.0, 2.0], motivation=[0.1] * 12, skipped=0)
    assert frame is not None
    assert len(sparkline([1.0, 2.0, 3.0]).plain) == 3


def test_debug_trace_prints_tick_lines(monkeypatch, capsys) -> None:
    monkeypatch.setattr(wm_logging, "DEBUG", True)
    run_task(steps=2, seed=0, latent_dim=4, hidden_dim=8, stages="stub")
    lines = [line for line in capsys.readouterr().out.splitlines() if line.startswith("[pipeline")]
    assert len(lines) == 2
    assert lines[0].startswith("[pipeline tick=1 +")
    assert "action=[0, 2]" in lines[1]
