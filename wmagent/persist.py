"""Persistence helpers for the world-model pipeline.

Only carried recurrent state is checkpointed: hidden state, cached latent,
predicted latent, observation history and tick count. Stage artifacts are
supplied externally and never written here.
"""

from __future__ import annotations

import logging
import pickle
from pathlib import Path

from wmagent.inference.pipeline import RecurrentPipeline
from wmagent.types import PipelineSnapshot

logger = logging.getLogger(__name__)


def persist_state(pipeline: RecurrentPipeline, path: Path) -> None:
    """Pickle the pipeline's carried state to `path`, creating parent dirs."""
    snap = pipeline.snapshot()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as fid:
        pickle.dump(snap, fid)
    logger.info("Persisted pipeline state (tick %d) to %s", snap.tick_count, path)


def load_state(pipeline: RecurrentPipeline, path: Path) -> bool:
    """Load carried state from `path` into `pipeline`.

    Returns True if loaded, False if the file does not exist. Raises
    ValueError if the snapshot's dimensions disagree with the pipeline config.
    """
    path = Path(path)
    if not path.exists():
        return False
    with path.open("rb") as fid:
        snap = pickle.load(fid)
    if not isinstance(snap, PipelineSnapshot):
        raise ValueError(f"{path} does not contain a PipelineSnapshot")
    pipeline.restore(snap)
    logger.info("Loaded pipeline state (tick %d) from %s", snap.tick_count, path)
    return True
