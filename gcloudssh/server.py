"""Server operations: install the public key on a VM and report how to connect."""

from pathlib import Path

from .errors import DeploymentFailed, IoFailure, NoExternalIp
from .keys import read_public_key
from .providers import GCloudProvider
from .types import ConnectionInfo, Instance
from .utils import get_local_username, log

REMOTE_SSH_DIR = "~/.ssh"
REMOTE_AUTHORIZED_KEYS = "~/.ssh/authorized_keys"


def build_authorized_keys_command(public_key: str) -> str:
    """Remote shell command that appends a public key to authorized_keys.

    The directory is created and locked down before the append, and the file
    is tightened to 0600 after it. The append always happens, so running this
    twice leaves the key in the file twice.

    :param public_key: Public key line (surrounding whitespace is trimmed)
    :return: Single shell command string
    """
    escaped = public_key.strip().replace("'", "'\\''")
    return (
        f"mkdir -p {REMOTE_SSH_DIR} && chmod 700 {REMOTE_SSH_DIR} && "
        f"echo '{escaped}' >> {REMOTE_AUTHORIZED_KEYS} && "
        f"chmod 600 {REMOTE_AUTHORIZED_KEYS}"
    )


def deploy_key(
    provider: GCloudProvider, instance: Instance, home: Path | None = None
) -> None:
    """Copy the local public key into the VM's authorized_keys.

    :param provider: gcloud wrapper used for remote execution
    :param instance: Target VM
    :param home: Home directory override (defaults to the operator's)
    :raises IoFailure: If the local public key cannot be read
    :raises DeploymentFailed: If the remote command exits non-zero
    """
    log(f"Copying SSH key to VM: '{instance.name}'")
    remote_cmd = build_authorized_keys_command(read_public_key(home))
    result = provider.run_remote(instance.name, instance.zone(), remote_cmd)
    if not result.ok:
        raise DeploymentFailed(result.stderr)
    log(f"SSH key successfully copied to VM: '{instance.name}'")


def report_connection(instance: Instance, username: str | None = None) -> ConnectionInfo:
    """Build the ssh command for connecting to the instance.

    :param instance: Selected VM
    :param username: Local username override (defaults to the current login)
    :return: Connection details including the ``ssh user@ip`` command
    :raises NoExternalIp: If no interface of the VM has a NAT IP
    :raises IoFailure: If the local username cannot be determined
    """
    ip = instance.external_ip()
    if ip is None:
        raise NoExternalIp(instance.name)

    if username is None:
        try:
            username = get_local_username()
        except (OSError, KeyError) as e:
            raise IoFailure(f"Could not determine the local username: {e}") from e

    return ConnectionInfo(name=instance.name, zone=instance.zone(), ip=ip, username=username)
