from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Job(ApiModel):
    id: Optional[str] = None
    report_type_id: Optional[str] = None
    name: Optional[str] = None
    create_time: Optional[str] = None
    expire_time: Optional[str] = None
    system_managed: Optional[bool] = None


class Report(ApiModel):
    id: Optional[str] = None
    job_id: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    create_time: Optional[str] = None
    job_expire_time: Optional[str] = None
    download_url: Optional[str] = None


class ReportType(ApiModel):
    id: Optional[str] = None
    name: Optional[str] = None
    deprecate_time: Optional[str] = None
    system_managed: Optional[bool] = None


class Media(ApiModel):
    resource_name: Optional[str] = None


class Empty(ApiModel):
    pass


class ListJobsResponse(ApiModel):
    jobs: List[Job] = Field(default_factory=list)
    next_page_token: Optional[str] = None


class ListReportsResponse(ApiModel):
    reports: List[Report] = Field(default_factory=list)
    next_page_token: Optional[str] = None


class ListReportTypesResponse(ApiModel):
    report_types: List[ReportType] = Field(default_factory=list)
    next_page_token: Optional[str] = None


MODEL_TYPES = {
    "Job": Job,
    "Report": Report,
    "ReportType": ReportType,
    "Media": Media,
    "Empty": Empty,
    "ListJobsResponse": ListJobsResponse,
    "ListReportsResponse": ListReportsResponse,
    "ListReportTypesResponse": ListReportTypesResponse,
}
