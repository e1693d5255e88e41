from .step_10_detect_platform import DetectPlatformStep
from .step_20_install_tools import InstallToolsStep
from .step_80_provision_configs import ProvisionConfigsStep
from .step_85_shell_integration import ShellIntegrationStep
from .step_90_set_default_shell import SetDefaultShellStep

__all__ = [
    "DetectPlatformStep",
    "InstallToolsStep",
    "ProvisionConfigsStep",
    "ShellIntegrationStep",
    "SetDefaultShellStep",
]
