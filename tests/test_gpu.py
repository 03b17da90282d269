from __future__ import annotations

import pytest

from ollama_installer.errors import InstallStopped
from ollama_installer.lib.gpu import GpuStatus, classify_gpu, cuda_version
from ollama_installer.steps.step_50_detect_gpu import DetectGpuStep

LSPCI_NVIDIA = "01:00.0 VGA compatible controller: NVIDIA Corporation AD102 [GeForce RTX 4090] (rev a1)\n"
LSHW_NVIDIA = """\
  *-display
       description: VGA compatible controller
       product: AD102 [GeForce RTX 4090] [10DE:2684]
       vendor: NVIDIA Corporation [10DE]
"""
LSHW_INTEL = """\
  *-display
       product: UHD Graphics 620 [8086:5917]
       vendor: Intel Corporation [8086]
"""


def test_no_detection_tools(tools, fake_run):
    tools.add("nvidia-smi")
    assert classify_gpu() is GpuStatus.NO_DETECTION_TOOLS
    assert fake_run.calls == []


def test_working_driver_short_circuits(tools, fake_run):
    tools.update({"lspci", "nvidia-smi"})
    assert classify_gpu() is GpuStatus.DRIVER_PRESENT
    assert fake_run.calls == []


def test_lspci_match_needs_driver(tools, fake_run):
    tools.add("lspci")
    fake_run.respond("lspci", "-d", "10de:", stdout=LSPCI_NVIDIA)

    assert classify_gpu() is GpuStatus.NEEDS_DRIVER


def test_lshw_match_needs_driver(tools, fake_run):
    tools.update({"lspci", "lshw"})
    fake_run.respond("lspci", "-d", "10de:", stdout="")
    fake_run.respond("sudo", "lshw", "-c", "display", "-numeric", stdout=LSHW_NVIDIA)

    assert classify_gpu(("sudo",)) is GpuStatus.NEEDS_DRIVER
    assert fake_run.ran("sudo", "lshw", "-c", "display", "-numeric")


def test_no_match_is_cpu_only(tools, fake_run):
    tools.update({"lspci", "lshw"})
    fake_run.respond("lshw", "-c", "display", "-numeric", stdout=LSHW_INTEL)

    assert classify_gpu() is GpuStatus.NOT_DETECTED


def test_lspci_failure_is_not_a_match(tools, fake_run):
    tools.add("lspci")
    fake_run.respond("lspci", stdout=LSPCI_NVIDIA, returncode=1)

    assert classify_gpu() is GpuStatus.NOT_DETECTED


def test_cuda_version_from_nvidia_smi(tools, fake_run):
    tools.add("nvidia-smi")
    fake_run.respond(
        "nvidia-smi",
        stdout="| NVIDIA-SMI 550.54.15   Driver Version: 550.54.15   CUDA Version: 12.4     |\n",
    )
    assert cuda_version() == "12.4"


def test_cuda_version_without_driver(tools, fake_run):
    assert cuda_version() is None


@pytest.mark.parametrize(
    "present,stdout,message",
    [
        (set(), "", "Install lspci or lshw"),
        ({"lspci", "nvidia-smi"}, "", "NVIDIA GPU installed."),
        ({"lspci"}, "", "CPU-only mode"),
    ],
)
def test_step_soft_stops(tools, fake_run, host, present, stdout, message):
    tools.update(present)

    with pytest.raises(InstallStopped, match=message):
        DetectGpuStep().run({"host": host})


def test_step_continues_when_driver_is_needed(tools, fake_run, host):
    tools.add("lspci")
    fake_run.respond("lspci", "-d", "10de:", stdout=LSPCI_NVIDIA)

    state = DetectGpuStep().run({"host": host})

    assert state["execution"]["decisions"]["gpu"] == "needs_driver"
