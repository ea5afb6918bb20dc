from __future__ import annotations

import json
from typing import Any

from ytreporting.cli import main
from ytreporting.client import ReportingClient
from ytreporting.config import ServiceConfig


def _factory(transport: Any):
    return lambda: ReportingClient(transport, config=ServiceConfig(base_url="http://testserver/"))


def test_cli_lists_all_jobs(transport: Any, service: Any, capsys) -> None:
    for n in range(1, 4):
        service.add_job(id=f"job-{n}", reportTypeId="channel_basic_a2")

    code = main(["--on-behalf-of-content-owner", "owner-1", "jobs", "list"], client_factory=_factory(transport))
    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert [job["id"] for job in out] == ["job-1", "job-2", "job-3"]
    assert out[0]["reportTypeId"] == "channel_basic_a2"
    assert {call["query"]["onBehalfOfContentOwner"] for call in service.calls} == {"owner-1"}


def test_cli_creates_job(transport: Any, service: Any, capsys) -> None:
    code = main(["jobs", "create", "--report-type-id", "channel_basic_a2", "--name", "daily"], client_factory=_factory(transport))
    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["name"] == "daily"
    assert out["id"] in service.jobs


def test_cli_downloads_media(transport: Any, service: Any, tmp_path, capsys) -> None:
    service.media["CHANNEL/r1.csv"] = b"a,b\n1,2\n"
    target = tmp_path / "r1.csv"
    code = main(["media", "download", "CHANNEL/r1.csv", "--out", str(target)], client_factory=_factory(transport))
    assert code == 0
    assert target.read_bytes() == b"a,b\n1,2\n"
    assert json.loads(capsys.readouterr().out)["bytes"] == 8


def test_cli_reports_transport_errors(transport: Any, capsys) -> None:
    code = main(["jobs", "get", "missing"], client_factory=_factory(transport))
    assert code == 1
    assert "NOT_FOUND" in capsys.readouterr().err


def test_cli_reports_validation_errors(transport: Any, service: Any, capsys) -> None:
    code = main(["reports", "get", "job-1", ""], client_factory=_factory(transport))
    assert code == 2
    assert "reportId" in capsys.readouterr().err
    assert service.calls == []
