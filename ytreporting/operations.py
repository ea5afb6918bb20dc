"""Operation table and request builders for the YouTube Reporting API (youtubereporting/v1)."""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Mapping, Optional, Union

from ytreporting.request import OperationSpec, Parameter, Request
from ytreporting.types import (
    Empty,
    Job,
    ListJobsResponse,
    ListReportsResponse,
    ListReportTypesResponse,
    Media,
    Report,
)

_FIELDS = Parameter("fields")
_ON_BEHALF_OF_CONTENT_OWNER = Parameter("onBehalfOfContentOwner")
_PAGE_SIZE = Parameter("pageSize")
_PAGE_TOKEN = Parameter("pageToken")
_INCLUDE_SYSTEM_MANAGED = Parameter("includeSystemManaged")
_JOB_ID = Parameter("jobId", "path", required=True)

JOBS_CREATE = OperationSpec(
    operation_id="youtubereporting.jobs.create",
    http_method="POST",
    path_template="v1/jobs",
    parameters=(_ON_BEHALF_OF_CONTENT_OWNER, Parameter("job", "body", required=True), _FIELDS),
    response_type=Job,
)

JOBS_DELETE = OperationSpec(
    operation_id="youtubereporting.jobs.delete",
    http_method="DELETE",
    path_template="v1/jobs/{jobId}",
    parameters=(_JOB_ID, _ON_BEHALF_OF_CONTENT_OWNER, _FIELDS),
    response_type=Empty,
)

JOBS_GET = OperationSpec(
    operation_id="youtubereporting.jobs.get",
    http_method="GET",
    path_template="v1/jobs/{jobId}",
    parameters=(_JOB_ID, _ON_BEHALF_OF_CONTENT_OWNER, _FIELDS),
    response_type=Job,
)

JOBS_LIST = OperationSpec(
    operation_id="youtubereporting.jobs.list",
    http_method="GET",
    path_template="v1/jobs",
    parameters=(_INCLUDE_SYSTEM_MANAGED, _ON_BEHALF_OF_CONTENT_OWNER, _PAGE_SIZE, _PAGE_TOKEN, _FIELDS),
    response_type=ListJobsResponse,
    items_field="jobs",
)

JOBS_REPORTS_GET = OperationSpec(
    operation_id="youtubereporting.jobs.reports.get",
    http_method="GET",
    path_template="v1/jobs/{jobId}/reports/{reportId}",
    parameters=(_JOB_ID, _ON_BEHALF_OF_CONTENT_OWNER, Parameter("reportId", "path", required=True), _FIELDS),
    response_type=Report,
)

JOBS_REPORTS_LIST = OperationSpec(
    operation_id="youtubereporting.jobs.reports.list",
    http_method="GET",
    path_template="v1/jobs/{jobId}/reports",
    parameters=(
        Parameter("createdAfter"),
        _JOB_ID,
        _ON_BEHALF_OF_CONTENT_OWNER,
        _PAGE_SIZE,
        _PAGE_TOKEN,
        Parameter("startTimeAtOrAfter"),
        Parameter("startTimeBefore"),
        _FIELDS,
    ),
    response_type=ListReportsResponse,
    items_field="reports",
)

MEDIA_DOWNLOAD = OperationSpec(
    operation_id="youtubereporting.media.download",
    http_method="GET",
    path_template="v1/media/{+resourceName}",
    parameters=(Parameter("resourceName", "path", required=True), _FIELDS),
    response_type=Media,
)

# Same endpoint; alt=media switches the payload from metadata to the report bytes.
MEDIA_DOWNLOAD_DATA = replace(MEDIA_DOWNLOAD, response_type=bytes, fixed_query=(("alt", "media"),))

REPORT_TYPES_LIST = OperationSpec(
    operation_id="youtubereporting.reportTypes.list",
    http_method="GET",
    path_template="v1/reportTypes",
    parameters=(_INCLUDE_SYSTEM_MANAGED, _ON_BEHALF_OF_CONTENT_OWNER, _PAGE_SIZE, _PAGE_TOKEN, _FIELDS),
    response_type=ListReportTypesResponse,
    items_field="reportTypes",
)

OPERATIONS: Dict[str, OperationSpec] = {
    spec.operation_id: spec
    for spec in (
        JOBS_CREATE,
        JOBS_DELETE,
        JOBS_GET,
        JOBS_LIST,
        JOBS_REPORTS_GET,
        JOBS_REPORTS_LIST,
        MEDIA_DOWNLOAD,
        REPORT_TYPES_LIST,
    )
}


def build_request(operation_id: str, values: Optional[Mapping[str, Any]] = None) -> Request:
    spec = OPERATIONS.get(operation_id)
    if spec is None:
        raise KeyError(f"Unknown operation: {operation_id}")
    return spec.build(values)


def jobs_create(
    job: Union[Job, Mapping[str, Any]],
    *,
    on_behalf_of_content_owner: Optional[str] = None,
    fields: Optional[str] = None,
) -> Request:
    return JOBS_CREATE.build({"job": job, "onBehalfOfContentOwner": on_behalf_of_content_owner, "fields": fields})


def jobs_delete(job_id: str, *, on_behalf_of_content_owner: Optional[str] = None, fields: Optional[str] = None) -> Request:
    return JOBS_DELETE.build({"jobId": job_id, "onBehalfOfContentOwner": on_behalf_of_content_owner, "fields": fields})


def jobs_get(job_id: str, *, on_behalf_of_content_owner: Optional[str] = None, fields: Optional[str] = None) -> Request:
    return JOBS_GET.build({"jobId": job_id, "onBehalfOfContentOwner": on_behalf_of_content_owner, "fields": fields})


def jobs_list(
    *,
    include_system_managed: Optional[bool] = None,
    on_behalf_of_content_owner: Optional[str] = None,
    page_size: Optional[int] = None,
    page_token: Optional[str] = None,
    fields: Optional[str] = None,
) -> Request:
    return JOBS_LIST.build(
        {
            "includeSystemManaged": include_system_managed,
            "onBehalfOfContentOwner": on_behalf_of_content_owner,
            "pageSize": page_size,
            "pageToken": page_token,
            "fields": fields,
        }
    )


def jobs_reports_get(
    job_id: str,
    report_id: str,
    *,
    on_behalf_of_content_owner: Optional[str] = None,
    fields: Optional[str] = None,
) -> Request:
    return JOBS_REPORTS_GET.build(
        {
            "jobId": job_id,
            "reportId": report_id,
            "onBehalfOfContentOwner": on_behalf_of_content_owner,
            "fields": fields,
        }
    )


def jobs_reports_list(
    job_id: str,
    *,
    created_after: Optional[Any] = None,
    start_time_at_or_after: Optional[Any] = None,
    start_time_before: Optional[Any] = None,
    on_behalf_of_content_owner: Optional[str] = None,
    page_size: Optional[int] = None,
    page_token: Optional[str] = None,
    fields: Optional[str] = None,
) -> Request:
    return JOBS_REPORTS_LIST.build(
        {
            "createdAfter": created_after,
            "jobId": job_id,
            "onBehalfOfContentOwner": on_behalf_of_content_owner,
            "pageSize": page_size,
            "pageToken": page_token,
            "startTimeAtOrAfter": start_time_at_or_after,
            "startTimeBefore": start_time_before,
            "fields": fields,
        }
    )


def media_download(resource_name: str, *, fields: Optional[str] = None) -> Request:
    return MEDIA_DOWNLOAD.build({"resourceName": resource_name, "fields": fields})


def media_download_data(resource_name: str) -> Request:
    return MEDIA_DOWNLOAD_DATA.build({"resourceName": resource_name})


def report_types_list(
    *,
    include_system_managed: Optional[bool] = None,
    on_behalf_of_content_owner: Optional[str] = None,
    page_size: Optional[int] = None,
    page_token: Optional[str] = None,
    fields: Optional[str] = None,
) -> Request:
    return REPORT_TYPES_LIST.build(
        {
            "includeSystemManaged": include_system_managed,
            "onBehalfOfContentOwner": on_behalf_of_content_owner,
            "pageSize": page_size,
            "pageToken": page_token,
            "fields": fields,
        }
    )
