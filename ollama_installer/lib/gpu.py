from __future__ import annotations

import enum
import logging
import re
from typing import Optional, Sequence

from .command import available, run_cmd

logger = logging.getLogger(__name__)

NVIDIA_PCI_VENDOR = "10de"

_LSHW_NVIDIA = re.compile(r"vendor: .* \[10DE\]")
_CUDA_VERSION = re.compile(r"CUDA Version: [0-9]*\.[0-9]*")


class GpuStatus(enum.Enum):
    NO_DETECTION_TOOLS = "no_detection_tools"
    DRIVER_PRESENT = "driver_present"
    NOT_DETECTED = "not_detected"
    NEEDS_DRIVER = "needs_driver"


def has_lspci_match() -> bool:
    if not available("lspci"):
        return False
    r = run_cmd(["lspci", "-d", f"{NVIDIA_PCI_VENDOR}:"], check=False)
    return r.ok and "NVIDIA" in r.stdout


def has_lshw_match(sudo: Sequence[str] = ()) -> bool:
    if not available("lshw"):
        return False
    r = run_cmd([*sudo, "lshw", "-c", "display", "-numeric"], check=False)
    return r.ok and bool(_LSHW_NVIDIA.search(r.stdout))


def has_nvidia_smi() -> bool:
    return available("nvidia-smi")


def cuda_version() -> Optional[str]:
    """`CUDA Version: X.Y` as reported by nvidia-smi, if the driver works."""

    if not has_nvidia_smi():
        return None
    r = run_cmd(["nvidia-smi"], check=False)
    m = _CUDA_VERSION.search(r.stdout or "")
    return m.group(0).split(":", 1)[1].strip() if m else None


def classify_gpu(sudo: Sequence[str] = ()) -> GpuStatus:
    """Decide what, if anything, to do about NVIDIA drivers.

    Evaluated in order: detection tooling, working driver, hardware match.
    """

    if not available("lspci") and not available("lshw"):
        return GpuStatus.NO_DETECTION_TOOLS
    if has_nvidia_smi():
        return GpuStatus.DRIVER_PRESENT
    if has_lspci_match() or has_lshw_match(sudo):
        return GpuStatus.NEEDS_DRIVER
    return GpuStatus.NOT_DETECTED
