"""Unit tests for the five-stage provisioning workflow."""

import pytest

from conftest import FakePresenter, failed, make_instance_dict, ok
from gcloudssh.errors import (
    DecodingFailed,
    DeploymentFailed,
    KeyGenerationFailed,
    ListingFailed,
    NoExternalIp,
    NoInstancesFound,
    SelectionAborted,
)
from gcloudssh.types import Instance
from gcloudssh.workflow import Stage, run_workflow, select_instance


def _catalog():
    return [
        Instance.from_dict(make_instance_dict("web-1", "us-central1-a", ("34.1.2.3",))),
        Instance.from_dict(make_instance_dict("db-1", "us-central1-b", (None,))),
    ]


# ── select_instance ───────────────────────────────────────────────


def test_select_instance_returns_chosen_record():
    presenter = FakePresenter(choice=1)
    catalog = _catalog()
    chosen = select_instance(catalog, presenter)
    assert chosen == catalog[1]
    assert chosen is not catalog[1]


def test_select_instance_menu_in_catalog_order():
    presenter = FakePresenter(choice=0)
    select_instance(_catalog(), presenter)
    assert presenter.menu == [
        "web-1 (zone: us-central1-a) - IP: 34.1.2.3",
        "db-1 (zone: us-central1-b) - No external IP",
    ]


@pytest.mark.parametrize("index", [2, 5, -1, True, False, "1"])
def test_select_instance_rejects_out_of_range(index):
    with pytest.raises(SelectionAborted):
        select_instance(_catalog(), FakePresenter(choice=index))


def test_select_instance_cancelled():
    with pytest.raises(SelectionAborted):
        select_instance(_catalog(), FakePresenter(choice=None))


# ── run_workflow ──────────────────────────────────────────────────


def test_end_to_end_single_instance(make_provider, listing_payload, home_with_keys):
    provider, runner = make_provider(
        listing=ok(listing_payload(make_instance_dict("worker-1", "us-central1-a", ("34.1.2.3",)))),
        ssh=ok(),
    )
    presenter = FakePresenter(choice=0)

    outcome = run_workflow(provider, presenter, home=home_with_keys, username="alice")

    assert outcome.completed
    assert outcome.error is None
    assert outcome.connection.command == "ssh alice@34.1.2.3"
    assert ("connection", outcome.connection) in presenter.events
    assert [args[:3] for _, args in runner.calls] == [
        ["compute", "instances", "list"],
        ["compute", "ssh", "worker-1"],
    ]


def test_generates_key_before_listing(make_provider, listing_payload, home):
    provider, runner = make_provider(
        keygen=ok(),
        listing=ok(listing_payload(make_instance_dict())),
        ssh=ok(),
    )

    def _keygen_writes_files(program, args, _run=runner.run):
        result = _run(program, args)
        if args[:2] == ["compute", "ssh-keys"]:
            (home / ".ssh" / "id_rsa").write_text("private")
            (home / ".ssh" / "id_rsa.pub").write_text("ssh-rsa AAAA new@host\n")
        return result

    runner.run = _keygen_writes_files
    presenter = FakePresenter()
    outcome = run_workflow(provider, presenter, home=home, username="alice")

    assert outcome.completed
    assert [args[0:2] for _, args in runner.calls] == [
        ["compute", "ssh-keys"],
        ["compute", "instances"],
        ["compute", "ssh"],
    ]
    assert ("success", "SSH key generated.") in presenter.events


@pytest.mark.parametrize(
    "responses,stage,error_type",
    [
        ({"listing": failed("list boom")}, Stage.LIST_INSTANCES, ListingFailed),
        ({"listing": ok("{oops")}, Stage.LIST_INSTANCES, DecodingFailed),
        ({"listing": ok("[]")}, Stage.LIST_INSTANCES, NoInstancesFound),
    ],
)
def test_listing_failure_stops_pipeline(make_provider, home_with_keys, responses, stage, error_type):
    provider, runner = make_provider(**responses)

    outcome = run_workflow(provider, FakePresenter(), home=home_with_keys, username="alice")

    assert not outcome.completed
    assert outcome.stage is stage
    assert isinstance(outcome.error, error_type)
    assert outcome.connection is None
    assert not runner.calls_for("compute ssh worker-1")


def test_keygen_failure_stops_before_listing(make_provider, home):
    provider, runner = make_provider(keygen=failed("ERROR: (gcloud) no active account\n"))

    outcome = run_workflow(provider, FakePresenter(), home=home, username="alice")

    assert outcome.stage is Stage.ENSURE_KEY
    assert isinstance(outcome.error, KeyGenerationFailed)
    assert runner.calls_for("compute instances list") == []
    assert outcome.stage.label == "Ensure SSH key"


def test_selection_aborted(make_provider, listing_payload, home_with_keys):
    provider, runner = make_provider(listing=ok(listing_payload(make_instance_dict())))
    outcome = run_workflow(provider, FakePresenter(choice=None), home=home_with_keys, username="alice")
    assert outcome.stage is Stage.SELECT_INSTANCE
    assert isinstance(outcome.error, SelectionAborted)
    assert len(runner.calls) == 1


def test_deploy_failure_keeps_original_detail(make_provider, listing_payload, home_with_keys):
    stderr = "ERROR: (gcloud.compute.ssh) [/usr/bin/ssh] exited with return code [255].\n"
    provider, _ = make_provider(listing=ok(listing_payload(make_instance_dict())), ssh=failed(stderr, 255))

    outcome = run_workflow(provider, FakePresenter(), home=home_with_keys, username="alice")

    assert outcome.stage is Stage.DEPLOY_KEY
    assert isinstance(outcome.error, DeploymentFailed)
    assert outcome.error.detail == stderr
    # no rollback of the key store
    assert (home_with_keys / ".ssh" / "id_rsa.pub").exists()


def test_no_external_ip_after_deploy(make_provider, listing_payload, home_with_keys):
    provider, runner = make_provider(
        listing=ok(listing_payload(make_instance_dict("internal", "us-east1-b", (None,)))),
        ssh=ok(),
        ssh_target="internal",
    )
    presenter = FakePresenter()

    outcome = run_workflow(provider, presenter, home=home_with_keys, username="alice")

    assert outcome.stage is Stage.REPORT_CONNECTION
    assert isinstance(outcome.error, NoExternalIp)
    assert runner.calls_for("compute ssh internal")
    assert not any(kind == "connection" for kind, _ in presenter.events)


def test_unexpected_exceptions_propagate(make_provider, home_with_keys):
    provider, runner = make_provider()

    def _explode(program, args):
        raise RuntimeError("bug")

    runner.run = _explode
    with pytest.raises(RuntimeError):
        run_workflow(provider, FakePresenter(), home=home_with_keys, username="alice")
