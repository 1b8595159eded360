"""Google Cloud provider: drives the gcloud CLI and decodes its output."""

import json

from .errors import (
    DecodingFailed,
    KeyGenerationFailed,
    ListingFailed,
    NoInstancesFound,
)
from .types import CommandResult, Instance, ShapeError
from .utils import CommandRunner, SubprocessRunner, log

# ── Command builders ───────────────────────────────────────────────


def _gcloud_keygen_cmd() -> list[str]:
    """Build gcloud arguments that generate the local SSH key pair."""
    return ["compute", "ssh-keys", "create"]


def _gcloud_list_cmd() -> list[str]:
    """Build gcloud arguments that list instances as JSON."""
    return ["compute", "instances", "list", "--format=json"]


def _gcloud_ssh_cmd(instance: str, zone: str, command: str) -> list[str]:
    """Build gcloud arguments that run one shell command on an instance."""
    return ["compute", "ssh", instance, "--zone", zone, "--command", command]


# ── Catalog parsing ────────────────────────────────────────────────


def parse_instances(payload: str) -> list[Instance]:
    """Decode the JSON instance listing.

    :param payload: stdout of ``gcloud compute instances list --format=json``
    :return: Instances in listing order (never empty)
    :raises DecodingFailed: If the payload is not a JSON array of instance objects
    :raises NoInstancesFound: If the array is empty
    """
    try:
        payload.encode("utf-8")
    except UnicodeEncodeError as e:
        raise DecodingFailed(f"listing is not valid UTF-8: {e}") from e

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise DecodingFailed(str(e)) from e

    if not isinstance(data, list):
        raise DecodingFailed(f"expected a JSON array, got {type(data).__name__}")

    try:
        instances = [Instance.from_dict(item) for item in data]
    except ShapeError as e:
        raise DecodingFailed(str(e)) from e

    if not instances:
        raise NoInstancesFound()
    return instances


def format_instance_line(instance: Instance) -> str:
    """One display line for the selection menu."""
    ip = instance.external_ip()
    ip_display = f" - IP: {ip}" if ip else " - No external IP"
    return f"{instance.name} (zone: {instance.zone()}){ip_display}"


# ── Provider ───────────────────────────────────────────────────────


class GCloudProvider:
    """Thin wrapper over the gcloud CLI.

    Every method makes exactly one gcloud invocation; nothing is retried so
    auth and quota errors reach the operator unchanged.
    """

    def __init__(self, runner: CommandRunner | None = None, gcloud_bin: str = "gcloud"):
        self.runner = runner or SubprocessRunner()
        self.gcloud_bin = gcloud_bin

    def _gcloud(self, args: list[str]) -> CommandResult:
        return self.runner.run(self.gcloud_bin, args)

    def generate_ssh_key(self) -> None:
        """Ask gcloud to create the local SSH key pair.

        :raises KeyGenerationFailed: If gcloud exits non-zero
        """
        result = self._gcloud(_gcloud_keygen_cmd())
        if not result.ok:
            raise KeyGenerationFailed(result.stderr)

    def list_instances(self) -> list[Instance]:
        """List all VM instances in the active project.

        :return: Instances in the order gcloud returned them
        :raises ListingFailed: If gcloud exits non-zero
        :raises DecodingFailed: If the output is not the expected JSON shape
        :raises NoInstancesFound: If the project has no instances
        """
        result = self._gcloud(_gcloud_list_cmd())
        if not result.ok:
            raise ListingFailed(result.stderr)
        instances = parse_instances(result.stdout)
        log(f"Found {len(instances)} VM instances")
        return instances

    def run_remote(self, instance: str, zone: str, command: str) -> CommandResult:
        """Run a shell command on an instance through ``gcloud compute ssh``."""
        return self._gcloud(_gcloud_ssh_cmd(instance, zone, command))
