from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

import pytest
from fastapi import Body, FastAPI
from fastapi import Request as HttpRequest
from fastapi.responses import JSONResponse, Response
from fastapi.testclient import TestClient

from ytreporting.client import ReportingClient
from ytreporting.config import ServiceConfig
from ytreporting.services.transport import HttpTransport


class FakeReportingService:
    def __init__(self, default_page_size: int = 2) -> None:
        self.default_page_size = default_page_size
        self.jobs: Dict[str, Dict[str, Any]] = {}
        self.reports: Dict[str, List[Dict[str, Any]]] = {}
        self.report_types: List[Dict[str, Any]] = []
        self.media: Dict[str, bytes] = {}
        self.calls: List[Dict[str, Any]] = []
        self._next_job = 1

    def record(self, request: HttpRequest) -> None:
        self.calls.append(
            {
                "method": request.method,
                "path": request.url.path,
                "query": dict(request.query_params),
                "headers": dict(request.headers),
            }
        )

    def add_job(self, **fields: Any) -> Dict[str, Any]:
        job_id = fields.pop("id", None) or f"job-{self._next_job}"
        self._next_job += 1
        job = {"id": job_id, "createTime": "2026-10-01T00:00:00Z", **fields}
        self.jobs[job_id] = job
        return job

    def page(self, items: List[Dict[str, Any]], field: str, page_size: Optional[int], page_token: Optional[str]) -> Dict[str, Any]:
        size = page_size or self.default_page_size
        offset = int(page_token.split("-", 1)[1]) if page_token else 0
        body: Dict[str, Any] = {field: items[offset:offset + size]}
        if offset + size < len(items):
            body["nextPageToken"] = f"offset-{offset + size}"
        return body


def _not_found(message: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": {"code": 404, "message": message, "status": "NOT_FOUND"}})


def build_reporting_app(service: FakeReportingService) -> FastAPI:
    app = FastAPI()

    @app.get("/v1/jobs")
    def list_jobs(
        request: HttpRequest,
        includeSystemManaged: bool = False,
        pageSize: Optional[int] = None,
        pageToken: Optional[str] = None,
    ):
        service.record(request)
        jobs = [j for j in service.jobs.values() if includeSystemManaged or not j.get("systemManaged")]
        return service.page(jobs, "jobs", pageSize, pageToken)

    @app.post("/v1/jobs")
    def create_job(request: HttpRequest, payload: Dict[str, Any] = Body(...)):
        service.record(request)
        return service.add_job(**payload)

    @app.get("/v1/jobs/{job_id}")
    def get_job(request: HttpRequest, job_id: str):
        service.record(request)
        if job_id not in service.jobs:
            return _not_found(f"Job {job_id} not found")
        return service.jobs[job_id]

    @app.delete("/v1/jobs/{job_id}")
    def delete_job(request: HttpRequest, job_id: str):
        service.record(request)
        if service.jobs.pop(job_id, None) is None:
            return _not_found(f"Job {job_id} not found")
        return {}

    @app.get("/v1/jobs/{job_id}/reports")
    def list_reports(
        request: HttpRequest,
        job_id: str,
        pageSize: Optional[int] = None,
        pageToken: Optional[str] = None,
        createdAfter: Optional[str] = None,
    ):
        service.record(request)
        if job_id not in service.jobs:
            return _not_found(f"Job {job_id} not found")
        reports = service.reports.get(job_id, [])
        if createdAfter:
            reports = [r for r in reports if r["createTime"] > createdAfter]
        return service.page(reports, "reports", pageSize, pageToken)

    @app.get("/v1/jobs/{job_id}/reports/{report_id}")
    def get_report(request: HttpRequest, job_id: str, report_id: str):
        service.record(request)
        for report in service.reports.get(job_id, []):
            if report["id"] == report_id:
                return report
        return _not_found(f"Report {report_id} not found")

    @app.get("/v1/reportTypes")
    def list_report_types(
        request: HttpRequest,
        includeSystemManaged: bool = False,
        pageSize: Optional[int] = None,
        pageToken: Optional[str] = None,
    ):
        service.record(request)
        types = [t for t in service.report_types if includeSystemManaged or not t.get("systemManaged")]
        return service.page(types, "reportTypes", pageSize, pageToken)

    @app.get("/v1/media/{resource_name:path}")
    def download_media(request: HttpRequest, resource_name: str, alt: Optional[str] = None):
        service.record(request)
        if resource_name not in service.media:
            return _not_found(f"Media {resource_name} not found")
        if alt == "media":
            return Response(content=service.media[resource_name], media_type="text/csv")
        return {"resourceName": resource_name}

    return app


class AppTransport(HttpTransport):
    """HttpTransport that sends through a FastAPI TestClient instead of the network."""

    def __init__(self, app: FastAPI, **kwargs: Any) -> None:
        kwargs.setdefault("backoff_base_seconds", 0)
        super().__init__("http://testserver/", "test-token", **kwargs)
        self._client = TestClient(app)

    def _send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        payload: Optional[bytes],
    ) -> Tuple[int, Mapping[str, str], bytes]:
        resp = self._client.request(method, url, headers=headers, content=payload)
        return resp.status_code, resp.headers, resp.content


@pytest.fixture
def service() -> FakeReportingService:
    return FakeReportingService()


@pytest.fixture
def events() -> List[Dict[str, Any]]:
    return []


@pytest.fixture
def transport(service: FakeReportingService, events: List[Dict[str, Any]]) -> AppTransport:
    return AppTransport(build_reporting_app(service), logger=events.append)


@pytest.fixture
def client(transport: AppTransport, events: List[Dict[str, Any]]) -> ReportingClient:
    return ReportingClient(transport, config=ServiceConfig(base_url="http://testserver/"), logger=events.append)
