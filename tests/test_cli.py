"""Smoke tests for the CLI."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from contact_loader.cli.main import main
from contact_loader.errors import RetrievalError
from contact_loader.loaders.actionnetwork import ActionNetworkLoader
from contact_loader.models.job import ClientChoiceData
from contact_loader.store import ContactStore


def test_loaders_command(capsys: pytest.CaptureFixture) -> None:
    main(["loaders"])
    assert capsys.readouterr().out.strip() == "actionnetwork"


def test_lists_command_prints_choices(capsys: pytest.CaptureFixture) -> None:
    data = ClientChoiceData(data=json.dumps({"items": []}), expires_seconds=1800)
    with patch.object(ActionNetworkLoader, "get_client_choice_data", new=AsyncMock(return_value=data)):
        main(["lists"])
    printed = json.loads(capsys.readouterr().out)
    assert printed["expires_seconds"] == 1800


def test_lists_command_exits_on_error(capsys: pytest.CaptureFixture) -> None:
    data = ClientChoiceData(data=json.dumps({"error": "Failed to load choices from ActionNetwork"}))
    with patch.object(ActionNetworkLoader, "get_client_choice_data", new=AsyncMock(return_value=data)):
        with pytest.raises(SystemExit):
            main(["lists"])


def test_load_command_records_job(tmp_path, capsys: pytest.CaptureFixture) -> None:
    db = tmp_path / "cli.db"
    with patch.object(ActionNetworkLoader, "process_contact_load", new=AsyncMock(return_value=12)) as mock_load:
        main(["load", "--campaign-id", "3", "--list-id", "abc", "--count", "12", "--db", str(db)])
    job = mock_load.call_args.args[0]
    assert json.loads(job.payload) == {"listIdentifier": "abc", "requestContactCount": 12}
    assert ContactStore(db).get_job(job.id) is not None
    assert "loaded 12 contacts" in capsys.readouterr().out


def test_load_command_failure_exits(tmp_path) -> None:
    failure = AsyncMock(side_effect=RetrievalError("lists/abc/items", 1, "HTTP 503"))
    with patch.object(ActionNetworkLoader, "process_contact_load", new=failure):
        with pytest.raises(SystemExit):
            main(["load", "--campaign-id", "3", "--list-id", "abc", "--db", str(tmp_path / "cli.db")])


def test_zips_import_and_lookup(tmp_path, capsys: pytest.CaptureFixture) -> None:
    csv_path = tmp_path / "zips.csv"
    csv_path.write_text("zip,timezone_offset,has_dst\n02118,-5,1\n", encoding="utf-8")
    db = str(tmp_path / "cli.db")
    main(["zips", "import", "--csv", str(csv_path), "--db", db])
    main(["zips", "lookup", "--zip", "02118", "--db", db])
    out = capsys.readouterr().out
    assert "Imported 1 zip codes" in out
    assert "-5_1" in out
