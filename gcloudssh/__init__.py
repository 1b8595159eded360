"""gcloud-ssh - set up SSH access to Google Cloud VMs."""

__version__ = "0.1.0"

from .errors import (
    DecodingFailed,
    DeploymentFailed,
    HomeDirectoryUnavailable,
    IoFailure,
    KeyGenerationFailed,
    ListingFailed,
    NoExternalIp,
    NoInstancesFound,
    ProvisionError,
    SelectionAborted,
)
from .providers import GCloudProvider, parse_instances
from .types import AccessConfig, CommandResult, ConnectionInfo, Instance, NetworkInterface
from .utils import CommandRunner, SubprocessRunner, error, log, warn
from .workflow import Stage, WorkflowOutcome, run_workflow

__all__ = [
    "__version__",
    "AccessConfig",
    "CommandResult",
    "CommandRunner",
    "ConnectionInfo",
    "DecodingFailed",
    "DeploymentFailed",
    "GCloudProvider",
    "HomeDirectoryUnavailable",
    "Instance",
    "IoFailure",
    "KeyGenerationFailed",
    "ListingFailed",
    "NetworkInterface",
    "NoExternalIp",
    "NoInstancesFound",
    "ProvisionError",
    "SelectionAborted",
    "Stage",
    "SubprocessRunner",
    "WorkflowOutcome",
    "error",
    "log",
    "parse_instances",
    "run_workflow",
    "warn",
]
