from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import InstallStopped
from ..lib.env import host_from_state
from ..lib.gpu import GpuStatus, classify_gpu

logger = logging.getLogger(__name__)

_STOPS = {
    GpuStatus.NO_DETECTION_TOOLS: (
        "Unable to detect NVIDIA GPU. Install lspci or lshw to automatically detect and install NVIDIA CUDA drivers.",
        True,
    ),
    GpuStatus.DRIVER_PRESENT: ("NVIDIA GPU installed.", False),
    GpuStatus.NOT_DETECTED: ("No NVIDIA GPU detected. Ollama will run in CPU-only mode.", True),
}


class DetectGpuStep:
    step_id = "50_detect_gpu"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        host = host_from_state(state)

        status = classify_gpu(host.sudo)
        state.setdefault("execution", {}).setdefault("decisions", {})["gpu"] = status.value

        if status in _STOPS:
            reason, warning = _STOPS[status]
            raise InstallStopped(reason, warning=warning)
        return state
