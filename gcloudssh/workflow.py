"""Provisioning workflow: ensure key, list, select, deploy, report.

Stages run strictly in order and the first failure stops the pipeline.
Earlier side effects (key directory, generated keys) are left in place.
"""

import copy
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import ProvisionError, SelectionAborted
from .keys import ensure_key_pair
from .providers import GCloudProvider, format_instance_line
from .server import deploy_key, report_connection
from .types import ConnectionInfo, Instance
from .ui import Presenter


class Stage(Enum):
    ENSURE_KEY = "Ensure SSH key"
    LIST_INSTANCES = "List VM instances"
    SELECT_INSTANCE = "Select VM"
    DEPLOY_KEY = "Copy SSH key to VM"
    REPORT_CONNECTION = "Report connection"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class WorkflowOutcome:
    """Terminal state: completed with a connection, or failed at one stage."""

    connection: ConnectionInfo | None = None
    stage: Stage | None = None
    error: ProvisionError | None = None

    @property
    def completed(self) -> bool:
        return self.error is None


def select_instance(catalog: list[Instance], presenter: Presenter) -> Instance:
    """Let the operator pick one instance.

    :param catalog: Non-empty instance list in display order
    :param presenter: Collaborator that shows the menu and returns an index
    :return: Independent copy of the chosen instance
    :raises SelectionAborted: If the operator cancels or the index is out of range
    """
    index = presenter.select([format_instance_line(i) for i in catalog])
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(catalog):
        raise SelectionAborted(f"invalid selection index {index!r}")
    return copy.deepcopy(catalog[index])


def run_workflow(
    provider: GCloudProvider,
    presenter: Presenter,
    *,
    home: Path | None = None,
    username: str | None = None,
) -> WorkflowOutcome:
    """Run all five stages and return how it ended.

    ProvisionErrors are returned with the stage that raised them, never
    raised; anything else propagates.

    :param provider: gcloud wrapper
    :param presenter: Terminal collaborator for messages and the VM menu
    :param home: Home directory override for the key store
    :param username: Local username override for the ssh command
    """
    stage = Stage.ENSURE_KEY
    try:
        presenter.section("SSH Key")
        with presenter.spinner("Checking for an existing SSH key pair..."):
            generated = ensure_key_pair(provider, home=home)
        presenter.success("SSH key generated." if generated else "SSH key pair already exists.")

        stage = Stage.LIST_INSTANCES
        presenter.section("VM Instances")
        with presenter.spinner("Fetching VM instances..."):
            instances = provider.list_instances()
        presenter.success(f"Found {len(instances)} VM instances.")

        stage = Stage.SELECT_INSTANCE
        selected = select_instance(instances, presenter)

        stage = Stage.DEPLOY_KEY
        presenter.section("Deploy Key")
        with presenter.spinner(f"Copying SSH key to VM: {selected.name}"):
            deploy_key(provider, selected, home=home)
        presenter.progress("Finalizing")
        presenter.success(f"SSH key successfully copied to VM: {selected.name}")

        stage = Stage.REPORT_CONNECTION
        connection = report_connection(selected, username=username)
        presenter.connection(connection)
    except ProvisionError as e:
        return WorkflowOutcome(stage=stage, error=e)

    return WorkflowOutcome(connection=connection)
