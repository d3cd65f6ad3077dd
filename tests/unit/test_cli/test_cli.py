"""Tests for the command line interface.

Testing approach:
- Uses Click's CliRunner for command invocation
- Replaces the pipeline run so no upstream is contacted
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner
import pytest

from events_handler.cli.commands.events import load_event
from events_handler.cli.main import cli
from events_handler.core.exceptions import DeliveryFailed
from events_handler.features.events import (
    EventAction,
    OutcomeStatus,
    ProcessingOutcome,
    SubjectType,
)
from factories import CASE_URL

WEBHOOK_BODY = {
    "kanaal": "zaken",
    "resource": "status",
    "actie": "create",
    "hoofdObject": CASE_URL,
    "kenmerken": {},
}


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def event_file(tmp_path):
    path = tmp_path / "event.json"
    path.write_text(json.dumps(WEBHOOK_BODY), encoding="utf-8")
    return path


def _run_pipeline(outcome: ProcessingOutcome):
    return patch(
        "events_handler.cli.commands.events.run_pipeline",
        AsyncMock(return_value=outcome),
    )


class TestLoadEvent:
    def test_webhook_body(self) -> None:
        event = load_event(WEBHOOK_BODY)

        assert event.subject is SubjectType.CASE
        assert event.action is EventAction.UPDATED

    def test_notification_event(self) -> None:
        event = load_event({"subject": "case", "action": "closed", "reference": CASE_URL})

        assert event.action is EventAction.CLOSED


@pytest.mark.unit
def test_process_prints_outcome(cli_runner, event_file) -> None:
    outcome = ProcessingOutcome(status=OutcomeStatus.DELIVERED, event_reference=CASE_URL)

    with _run_pipeline(outcome) as run:
        result = cli_runner.invoke(cli, ["process", str(event_file)])

    assert result.exit_code == 0, result.output
    assert '"status": "delivered"' in result.output
    assert run.await_args.args[0].action is EventAction.UPDATED


@pytest.mark.unit
def test_failed_outcome_exits_with_1(cli_runner, event_file) -> None:
    outcome = ProcessingOutcome.from_error(OutcomeStatus.FAILED, DeliveryFailed("timeout"), CASE_URL)

    with _run_pipeline(outcome):
        result = cli_runner.invoke(cli, ["process", str(event_file)])

    assert result.exit_code == 1
    assert "DeliveryFailed" in result.output


@pytest.mark.unit
def test_invalid_json_exits_with_2(cli_runner, tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    result = cli_runner.invoke(cli, ["process", str(path)])

    assert result.exit_code == 2
    assert "not valid JSON" in result.output


@pytest.mark.unit
def test_invalid_event_exits_with_2(cli_runner, tmp_path) -> None:
    path = tmp_path / "event.json"
    path.write_text(json.dumps({"kanaal": "zaken"}), encoding="utf-8")

    with _run_pipeline(None) as run:
        result = cli_runner.invoke(cli, ["process", str(path)])

    assert result.exit_code == 2
    run.assert_not_awaited()


@pytest.mark.unit
def test_config_show_masks_secrets(cli_runner, monkeypatch) -> None:
    monkeypatch.setenv("NOTIFY_API_KEY", "super-secret-key")

    result = cli_runner.invoke(cli, ["config", "show", "--format", "json"])

    assert result.exit_code == 0, result.output
    sections = json.loads(result.output)
    assert sections["notify"]["api_key"] == "***"
    assert "super-secret-key" not in result.output
    assert {"app", "case_registry", "party_registry", "notify", "scenarios"} <= set(sections)


@pytest.mark.unit
def test_config_show_secrets_on_request(cli_runner, monkeypatch) -> None:
    monkeypatch.setenv("NOTIFY_API_KEY", "super-secret-key")

    result = cli_runner.invoke(cli, ["config", "show", "--format", "json", "--show-secrets"])

    assert json.loads(result.output)["notify"]["api_key"] == "super-secret-key"


@pytest.mark.unit
def test_serve_runs_uvicorn_factory(cli_runner) -> None:
    with patch("events_handler.cli.commands.server.uvicorn.run") as run:
        result = cli_runner.invoke(cli, ["serve", "--port", "9001"])

    assert result.exit_code == 0, result.output
    args, kwargs = run.call_args
    assert args == ("events_handler.app.main:create_app",)
    assert kwargs["factory"] is True
    assert kwargs["port"] == 9001
