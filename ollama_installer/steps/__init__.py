from .step_10_preflight import PreflightStep
from .step_20_install_binary import InstallBinaryStep
from .step_30_migrate_service import MigrateServiceStep
from .step_40_configure_service import ConfigureServiceStep
from .step_50_detect_gpu import DetectGpuStep
from .step_60_install_cuda_driver import InstallCudaDriverStep
from .step_70_load_kernel_module import LoadKernelModuleStep

__all__ = [
    "PreflightStep",
    "InstallBinaryStep",
    "MigrateServiceStep",
    "ConfigureServiceStep",
    "DetectGpuStep",
    "InstallCudaDriverStep",
    "LoadKernelModuleStep",
]
