"""Errors raised by the provisioning workflow.

- ProvisionError: base class, carries a human-readable message.
 |-HomeDirectoryUnavailable: operator home directory cannot be resolved.
 |-IoFailure: a local filesystem operation failed.
 |-KeyGenerationFailed: the key-generation command exited non-zero.
 |-ListingFailed: the instance listing command exited non-zero.
 |-DecodingFailed: the listing output did not have the expected shape.
 |-NoInstancesFound: the listing decoded to zero instances.
 |-SelectionAborted: the operator cancelled the selection prompt.
 |-DeploymentFailed: the remote key installation command exited non-zero.
 |-NoExternalIp: the selected instance has no external address.
"""

__all__ = [
    "ProvisionError",
    "HomeDirectoryUnavailable",
    "IoFailure",
    "KeyGenerationFailed",
    "ListingFailed",
    "DecodingFailed",
    "NoInstancesFound",
    "SelectionAborted",
    "DeploymentFailed",
    "NoExternalIp",
]


class ProvisionError(Exception):
    """Base class for all provisioning errors."""

    pass


class HomeDirectoryUnavailable(ProvisionError):
    def __init__(self) -> None:
        super().__init__("Could not determine the home directory")


class IoFailure(ProvisionError):
    """A local filesystem operation (create, read, chmod) failed."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"IO error: {detail}")


class KeyGenerationFailed(ProvisionError):
    """Key generation exited non-zero. ``detail`` is the raw stderr."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"No SSH key found and failed to generate one: {detail.strip()}")


class ListingFailed(ProvisionError):
    """Instance listing exited non-zero. ``detail`` is the raw stderr."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Failed to list VM instances: {detail.strip()}")


class DecodingFailed(ProvisionError):
    """Listing succeeded but its output did not match the expected shape."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Failed to parse VM instance JSON data: {detail}")


class NoInstancesFound(ProvisionError):
    def __init__(self) -> None:
        super().__init__("No VM instances found in the active project")


class SelectionAborted(ProvisionError):
    def __init__(self, reason: str = "selection cancelled") -> None:
        super().__init__(f"No VM selected: {reason}")


class DeploymentFailed(ProvisionError):
    """Remote key installation exited non-zero. ``detail`` is the raw stderr."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Failed to copy SSH key to VM: {detail.strip()}")


class NoExternalIp(ProvisionError):
    def __init__(self, name: str) -> None:
        super().__init__(f"VM '{name}' does not have an external IP address")
