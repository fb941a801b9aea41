from .step_10_dialout_group import DialoutGroupStep
from .step_20_system_packages import BasePackagesStep, SitlPackagesStep
from .step_30_python_venv import PythonVenvStep
from .step_40_python_packages import PythonPackagesStep
from .step_50_ccache import CcacheStep
from .step_60_toolchains import ToolchainStep, arm_linux_step, arm_none_eabi_step
from .step_70_remove_conflicting import RemoveConflictingPackagesStep
from .step_80_shell_env import ShellEnvStep
from .step_90_git_submodules import GitSubmodulesStep
from .step_95_finalize import FinalizeStep

__all__ = [
    "DialoutGroupStep",
    "BasePackagesStep",
    "SitlPackagesStep",
    "PythonVenvStep",
    "PythonPackagesStep",
    "CcacheStep",
    "ToolchainStep",
    "arm_none_eabi_step",
    "arm_linux_step",
    "RemoveConflictingPackagesStep",
    "ShellEnvStep",
    "GitSubmodulesStep",
    "FinalizeStep",
]
