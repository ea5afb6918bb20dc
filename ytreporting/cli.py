from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Callable, List, Optional

from pydantic import BaseModel

from ytreporting.client import ReportingClient
from ytreporting.config import ConfigurationError
from ytreporting.request import ValidationError
from ytreporting.services.transport import TransportError


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ytreporting", description="YouTube Reporting API command line client.")
    parser.add_argument("--on-behalf-of-content-owner", default=None, help="Content owner ID to act on behalf of")
    resources = parser.add_subparsers(dest="resource", required=True)

    jobs = resources.add_parser("jobs", help="Reporting jobs").add_subparsers(dest="action", required=True)
    jobs_list = jobs.add_parser("list", help="List all jobs")
    jobs_list.add_argument("--include-system-managed", action="store_true")
    jobs_list.add_argument("--page-size", type=int, default=None)
    jobs_list.add_argument("--max-pages", type=int, default=None)
    jobs.add_parser("get", help="Get a job").add_argument("job_id")
    jobs.add_parser("delete", help="Delete a job").add_argument("job_id")
    jobs_create = jobs.add_parser("create", help="Create a job")
    jobs_create.add_argument("--report-type-id", required=True)
    jobs_create.add_argument("--name", required=True)

    reports = resources.add_parser("reports", help="Reports of a job").add_subparsers(dest="action", required=True)
    reports_list = reports.add_parser("list", help="List all reports of a job")
    reports_list.add_argument("job_id")
    reports_list.add_argument("--created-after", default=None)
    reports_list.add_argument("--start-time-at-or-after", default=None)
    reports_list.add_argument("--start-time-before", default=None)
    reports_list.add_argument("--page-size", type=int, default=None)
    reports_list.add_argument("--max-pages", type=int, default=None)
    reports_get = reports.add_parser("get", help="Get report metadata")
    reports_get.add_argument("job_id")
    reports_get.add_argument("report_id")

    report_types = resources.add_parser("report-types", help="Report types").add_subparsers(dest="action", required=True)
    report_types_list = report_types.add_parser("list", help="List all report types")
    report_types_list.add_argument("--include-system-managed", action="store_true")
    report_types_list.add_argument("--page-size", type=int, default=None)
    report_types_list.add_argument("--max-pages", type=int, default=None)

    media = resources.add_parser("media", help="Report media").add_subparsers(dest="action", required=True)
    media_download = media.add_parser("download", help="Download report data")
    media_download.add_argument("resource_name")
    media_download.add_argument("--out", required=True, help="Path to write the downloaded bytes")
    return parser


def _run(client: ReportingClient, args: argparse.Namespace) -> Any:
    owner = args.on_behalf_of_content_owner
    command = (args.resource, args.action)
    if command == ("jobs", "list"):
        return client.list_all_jobs(
            include_system_managed=args.include_system_managed or None,
            on_behalf_of_content_owner=owner,
            page_size=args.page_size,
            max_pages=args.max_pages,
        )
    if command == ("jobs", "get"):
        return client.get_job(args.job_id, on_behalf_of_content_owner=owner)
    if command == ("jobs", "delete"):
        return client.delete_job(args.job_id, on_behalf_of_content_owner=owner)
    if command == ("jobs", "create"):
        job = {"reportTypeId": args.report_type_id, "name": args.name}
        return client.create_job(job, on_behalf_of_content_owner=owner)
    if command == ("reports", "list"):
        return client.list_all_reports(
            args.job_id,
            created_after=args.created_after,
            start_time_at_or_after=args.start_time_at_or_after,
            start_time_before=args.start_time_before,
            on_behalf_of_content_owner=owner,
            page_size=args.page_size,
            max_pages=args.max_pages,
        )
    if command == ("reports", "get"):
        return client.get_report(args.job_id, args.report_id, on_behalf_of_content_owner=owner)
    if command == ("report-types", "list"):
        return client.list_all_report_types(
            include_system_managed=args.include_system_managed or None,
            on_behalf_of_content_owner=owner,
            page_size=args.page_size,
            max_pages=args.max_pages,
        )
    if command == ("media", "download"):
        data = client.download_media(args.resource_name)
        with open(args.out, "wb") as f:
            f.write(data)
        return {"resourceName": args.resource_name, "out": args.out, "bytes": len(data)}
    raise ValueError(f"Unsupported command: {' '.join(command)}")


def main(argv: Optional[List[str]] = None, *, client_factory: Callable[[], ReportingClient] = ReportingClient) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        result = _run(client_factory(), args)
    except (ValidationError, ConfigurationError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except TransportError as exc:
        print(f"error: {exc.code} ({exc.status_code}): {exc.message}", file=sys.stderr)
        return 1
    print(json.dumps(_jsonable(result), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
