import numpy as np
import pytest

from wmagent.errors import InferenceStageFailure, InvalidInputName, UnknownStageType, UseAfterDispose
from wmagent.harness.stubs import ConstantStage, FailingStage, IncrementRNN
from wmagent.inference.buffers import StageBuffers, TensorBuffer
from wmagent.inference.executor import ModelExecutor
from wmagent.inference.stages import FunctionStage, load_stage, save_stage
from wmagent.types import StageType


def make_encoder(latent_dim: int = 4) -> ModelExecutor:
    stage = ConstantStage(StageType.ENCODER, {"latent_state": np.arange(latent_dim, dtype=float)})
    return ModelExecutor(stage, "encoder")


def test_unknown_stage_type_fails_at_construction() -> None:
    stage = ConstantStage(StageType.ENCODER, {"latent_state": [0.0]})
    with pytest.raises(UnknownStageType):
        ModelExecutor(stage, "decoder")


def test_transition_alias_resolves_to_rnn() -> None:
    executor = ModelExecutor(IncrementRNN(), "transition")
    assert executor.stage_type is StageType.RNN
    assert executor.output_names == ("hidden_state", "predicted_latent")


def test_execute_returns_declared_outputs() -> None:
    executor = make_encoder(4)
    out = executor.execute({"observation": [1.0, 2.0], "context": [0.0]})
    assert set(out) == {"latent_state"}
    assert np.allclose(out["latent_state"], [0.0, 1.0, 2.0, 3.0])
    assert np.allclose(executor.last_output("latent_state"), [0.0, 1.0, 2.0, 3.0])


def test_invalid_input_name_rejected_before_buffers_touched() -> None:
    executor = make_encoder()
    with pytest.raises(InvalidInputName) as excinfo:
        executor.execute({"observation": [1.0], "bogus": [2.0]})
    assert excinfo.value.name == "bogus"
    assert executor.live_buffer_count == 0


def test_input_name_reuse_does_not_leak_buffers() -> None:
    executor = make_encoder()
    rng = np.random.default_rng(0)
    for _ in range(1000):
        executor.execute({"observation": rng.normal(size=6), "context": rng.normal(size=3)})
        assert executor.live_buffer_count <= 3
    assert executor.inputs.live_count == 2
    assert executor.outputs.live_count == 1
    assert executor.inputs.allocated == 2000
    assert executor.inputs.freed == 1998


def test_stage_exception_becomes_inference_stage_failure() -> None:
    executor = ModelExecutor(FailingStage(StageType.CONTROLLER, "bad weights"), "controller")
    with pytest.raises(InferenceStageFailure) as excinfo:
        executor.execute({"latent_state": [0.0], "hidden_state": [0.0], "context": [0.0]})
    assert excinfo.value.stage == "controller"
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_missing_required_output_is_a_stage_failure() -> None:
    stage = FunctionStage(lambda inputs: {"predicted_latent": np.zeros(2)}, ["latent_state", "hidden_state", "context"])
    executor = ModelExecutor(stage, "rnn")
    with pytest.raises(InferenceStageFailure):
        executor.execute({"latent_state": [0.0], "hidden_state": [0.0], "context": [0.0]})


def test_optional_predicted_latent_may_be_omitted() -> None:
    stage = FunctionStage(
        lambda inputs: {"hidden_state": np.asarray(inputs["hidden_state"]) * 2.0},
        ["latent_state", "hidden_state", "context"],
    )
    executor = ModelExecutor(stage, "rnn")
    out = executor.execute({"latent_state": [0.0], "hidden_state": [1.5, 2.0], "context": [0.0]})
    assert set(out) == {"hidden_state"}
    assert np.allclose(out["hidden_state"], [3.0, 4.0])


def test_non_finite_output_is_a_stage_failure() -> None:
    stage = ConstantStage(StageType.CONTROLLER, {"action": [np.nan, 1.0]})
    executor = ModelExecutor(stage, "controller")
    with pytest.raises(InferenceStageFailure):
        executor.execute({"latent_state": [0.0], "hidden_state": [0.0], "context": [0.0]})


def test_dispose_releases_everything_and_second_call_is_noop() -> None:
    closed = []

    class ClosingStage(ConstantStage):
        def close(self) -> None:
            closed.append(True)

    executor = ModelExecutor(ClosingStage(StageType.ENCODER, {"latent_state": [1.0]}), "encoder")
    executor.execute({"observation": [1.0], "context": [2.0]})
    assert executor.live_buffer_count == 3

    executor.dispose()
    assert executor.disposed
    assert executor.live_buffer_count == 0
    assert closed == [True]

    executor.dispose()
    assert closed == [True]
    assert executor.live_buffer_count == 0


def test_execute_after_dispose_raises() -> None:
    executor = make_encoder()
    executor.dispose()
    with pytest.raises(UseAfterDispose):
        executor.execute({"observation": [1.0], "context": [2.0]})


def test_executor_as_context_manager() -> None:
    with make_encoder() as executor:
        executor.execute({"observation": [1.0], "context": [2.0]})
    assert executor.disposed


def test_buffer_double_release_is_detected() -> None:
    buf = TensorBuffer("x", [1.0, 2.0])
    buf.release()
    with pytest.raises(UseAfterDispose):
        buf.release()
    with pytest.raises(UseAfterDispose):
        _ = buf.data


def test_stage_buffers_replace_releases_previous() -> None:
    buffers = StageBuffers("test")
    first = buffers.replace("a", [1.0])
    second = buffers.replace("a", [2.0, 3.0])
    assert first.released
    assert not second.released
    assert buffers.live_count == 1
    assert len(second) == 2
    buffers.release_all()
    assert second.released
    assert buffers.live_count == 0
    assert len(buffers) == 0


def test_stage_sees_read_only_inputs() -> None:
    seen = {}

    def fn(inputs):
        seen["writeable"] = inputs["observation"].flags.writeable
        return {"latent_state": np.zeros(1)}

    executor = ModelExecutor(FunctionStage(fn, ["observation", "context"]), "encoder")
    executor.execute({"observation": [1.0], "context": [0.0]})
    assert seen["writeable"] is False


def test_stage_artifact_round_trip(tmp_path) -> None:
    path = tmp_path / "artifacts" / "rnn.pkl"
    save_stage(IncrementRNN(step=2.0), path)
    stage = load_stage(path)
    out = ModelExecutor(stage, "rnn").execute({"latent_state": [0.0], "hidden_state": [1.0], "context": [0.0]})
    assert np.allclose(out["hidden_state"], [3.0])


def test_load_stage_rejects_non_stage(tmp_path) -> None:
    import pickle

    path = tmp_path / "junk.pkl"
    path.write_bytes(pickle.dumps({"not": "a stage"}))
    with pytest.raises(TypeError):
        load_stage(path)
