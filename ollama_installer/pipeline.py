from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .errors import InstallStopped

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent step."""

    step_id: str

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]
    stopped_at: Optional[str] = None
    stop_reason: Optional[str] = None


def run_pipeline(
    *,
    state: Dict[str, Any],
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Run steps in order.

    A step raising InstallStopped ends the run early without error; any other
    exception propagates and leaves later steps unrun. Steps marked
    ``always_run`` still run when start_at skips past them.
    """

    known = {s.step_id for s in steps}
    for bound in (start_at, stop_after):
        if bound is not None and bound not in known:
            raise ValueError(f"Unknown step id: {bound}")

    ran: List[str] = []
    started = start_at is None
    exe = state.setdefault("execution", {})

    for step in steps:
        if not started:
            if step.step_id == start_at:
                started = True
            elif not getattr(step, "always_run", False):
                continue

        exe["current_step"] = step.step_id
        logger.debug("Running step %s", step.step_id)
        try:
            state = step.run(state)
        except InstallStopped as stop:
            if stop.warning:
                logger.warning("%s", stop.reason)
            else:
                logger.info("%s", stop.reason)
            ran.append(step.step_id)
            exe["current_step"] = None
            exe["stopped"] = {"step": step.step_id, "reason": stop.reason}
            return PipelineResult(state=state, ran_steps=ran, stopped_at=step.step_id, stop_reason=stop.reason)

        exe.setdefault("completed_steps", []).append(step.step_id)
        ran.append(step.step_id)

        if stop_after is not None and step.step_id == stop_after:
            logger.debug("Stopping after %s", stop_after)
            break

    exe["current_step"] = None
    return PipelineResult(state=state, ran_steps=ran)
