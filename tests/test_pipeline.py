from __future__ import annotations

import pytest

from ollama_installer.errors import InstallError, InstallStopped
from ollama_installer.pipeline import run_pipeline


class RecordingStep:
    def __init__(self, step_id, exc=None):
        self.step_id = step_id
        self.exc = exc

    def run(self, state):
        state.setdefault("seen", []).append(self.step_id)
        if self.exc:
            raise self.exc
        return state


def steps(*ids, **raising):
    return [RecordingStep(i, raising.get(i)) for i in ids]


def test_runs_all_steps_in_order():
    result = run_pipeline(state={}, steps=steps("a", "b", "c"))

    assert result.ran_steps == ["a", "b", "c"]
    assert result.state["seen"] == ["a", "b", "c"]
    assert result.state["execution"]["completed_steps"] == ["a", "b", "c"]
    assert result.stopped_at is None


def test_soft_stop_ends_run_without_error():
    result = run_pipeline(state={}, steps=steps("a", "b", "c", b=InstallStopped("No NVIDIA GPU detected.")))

    assert result.state["seen"] == ["a", "b"]
    assert result.stopped_at == "b"
    assert result.stop_reason == "No NVIDIA GPU detected."
    assert result.state["execution"]["stopped"] == {"step": "b", "reason": "No NVIDIA GPU detected."}


def test_errors_propagate_and_keep_current_step():
    state = {}
    with pytest.raises(InstallError):
        run_pipeline(state=state, steps=steps("a", "b", "c", b=InstallError("boom")))

    assert state["seen"] == ["a", "b"]
    assert state["execution"]["current_step"] == "b"


def test_start_at_and_stop_after():
    result = run_pipeline(state={}, steps=steps("a", "b", "c", "d"), start_at="b", stop_after="c")

    assert result.ran_steps == ["b", "c"]


def test_unknown_step_id():
    with pytest.raises(ValueError, match="Unknown step id"):
        run_pipeline(state={}, steps=steps("a"), start_at="z")


def test_always_run_steps_run_before_start_at():
    setup = RecordingStep("setup")
    setup.always_run = True
    result = run_pipeline(state={}, steps=[setup, *steps("a", "b")], start_at="b")

    assert result.ran_steps == ["setup", "b"]
