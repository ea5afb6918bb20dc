from __future__ import annotations

import itertools
from typing import Any, List, Mapping, Optional, Union

from ytreporting import operations
from ytreporting.config import ServiceConfig
from ytreporting.paginator import Paginator
from ytreporting.request import Request, ValidationError
from ytreporting.services.transport import EventLogger, HttpTransport, Transport
from ytreporting.types import (
    Empty,
    Job,
    ListJobsResponse,
    ListReportsResponse,
    ListReportTypesResponse,
    Media,
    Report,
    ReportType,
)


class ReportingClient:
    def __init__(
        self,
        transport: Optional[Transport] = None,
        *,
        config: Optional[ServiceConfig] = None,
        logger: Optional[EventLogger] = None,
    ):
        self.config = config or ServiceConfig.from_env()
        self.transport = transport or HttpTransport.from_config(self.config, logger=logger)
        self.logger = logger

    def _owner(self, value: Optional[str]) -> Optional[str]:
        return value if value is not None else self.config.on_behalf_of_content_owner

    def execute(self, request: Request) -> Any:
        return self.transport.execute(request)

    def paginate(
        self,
        request: Request,
        *,
        items_field: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> Paginator[Any]:
        if items_field is None:
            spec = operations.OPERATIONS.get(request.operation_id)
            if spec is None or not spec.paginated:
                raise ValidationError(
                    f"{request.operation_id}: operation does not return paged results",
                    operation_id=request.operation_id,
                )
            items_field = spec.items_field
        if page_size is None and request.query_value("pageSize") is None:
            page_size = self.config.default_page_size
        return Paginator(self.transport, request, items_field=items_field, page_size=page_size, logger=self.logger)

    @staticmethod
    def _collect(paginator: Paginator[Any], max_pages: Optional[int]) -> List[Any]:
        items: List[Any] = []
        for page in itertools.islice(paginator.pages(), max_pages):
            items.extend(page.items)
        return items

    def create_job(
        self,
        job: Union[Job, Mapping[str, Any]],
        *,
        on_behalf_of_content_owner: Optional[str] = None,
        fields: Optional[str] = None,
    ) -> Job:
        request = operations.jobs_create(job, on_behalf_of_content_owner=self._owner(on_behalf_of_content_owner), fields=fields)
        return self.execute(request)

    def delete_job(self, job_id: str, *, on_behalf_of_content_owner: Optional[str] = None) -> Empty:
        request = operations.jobs_delete(job_id, on_behalf_of_content_owner=self._owner(on_behalf_of_content_owner))
        return self.execute(request)

    def get_job(self, job_id: str, *, on_behalf_of_content_owner: Optional[str] = None, fields: Optional[str] = None) -> Job:
        request = operations.jobs_get(job_id, on_behalf_of_content_owner=self._owner(on_behalf_of_content_owner), fields=fields)
        return self.execute(request)

    def list_jobs(
        self,
        *,
        include_system_managed: Optional[bool] = None,
        on_behalf_of_content_owner: Optional[str] = None,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        fields: Optional[str] = None,
    ) -> ListJobsResponse:
        request = operations.jobs_list(
            include_system_managed=include_system_managed,
            on_behalf_of_content_owner=self._owner(on_behalf_of_content_owner),
            page_size=page_size,
            page_token=page_token,
            fields=fields,
        )
        return self.execute(request)

    def iter_jobs(
        self,
        *,
        include_system_managed: Optional[bool] = None,
        on_behalf_of_content_owner: Optional[str] = None,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        fields: Optional[str] = None,
    ) -> Paginator[Job]:
        request = operations.jobs_list(
            include_system_managed=include_system_managed,
            on_behalf_of_content_owner=self._owner(on_behalf_of_content_owner),
            page_token=page_token,
            fields=fields,
        )
        return self.paginate(request, page_size=page_size)

    def list_all_jobs(
        self,
        *,
        include_system_managed: Optional[bool] = None,
        on_behalf_of_content_owner: Optional[str] = None,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        fields: Optional[str] = None,
        max_pages: Optional[int] = None,
    ) -> List[Job]:
        paginator = self.iter_jobs(
            include_system_managed=include_system_managed,
            on_behalf_of_content_owner=on_behalf_of_content_owner,
            page_size=page_size,
            page_token=page_token,
            fields=fields,
        )
        return self._collect(paginator, max_pages)

    def get_report(
        self,
        job_id: str,
        report_id: str,
        *,
        on_behalf_of_content_owner: Optional[str] = None,
        fields: Optional[str] = None,
    ) -> Report:
        request = operations.jobs_reports_get(
            job_id,
            report_id,
            on_behalf_of_content_owner=self._owner(on_behalf_of_content_owner),
            fields=fields,
        )
        return self.execute(request)

    def list_reports(
        self,
        job_id: str,
        *,
        created_after: Optional[Any] = None,
        start_time_at_or_after: Optional[Any] = None,
        start_time_before: Optional[Any] = None,
        on_behalf_of_content_owner: Optional[str] = None,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        fields: Optional[str] = None,
    ) -> ListReportsResponse:
        request = operations.jobs_reports_list(
            job_id,
            created_after=created_after,
            start_time_at_or_after=start_time_at_or_after,
            start_time_before=start_time_before,
            on_behalf_of_content_owner=self._owner(on_behalf_of_content_owner),
            page_size=page_size,
            page_token=page_token,
            fields=fields,
        )
        return self.execute(request)

    def iter_reports(
        self,
        job_id: str,
        *,
        created_after: Optional[Any] = None,
        start_time_at_or_after: Optional[Any] = None,
        start_time_before: Optional[Any] = None,
        on_behalf_of_content_owner: Optional[str] = None,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        fields: Optional[str] = None,
    ) -> Paginator[Report]:
        request = operations.jobs_reports_list(
            job_id,
            created_after=created_after,
            start_time_at_or_after=start_time_at_or_after,
            start_time_before=start_time_before,
            on_behalf_of_content_owner=self._owner(on_behalf_of_content_owner),
            page_token=page_token,
            fields=fields,
        )
        return self.paginate(request, page_size=page_size)

    def list_all_reports(
        self,
        job_id: str,
        *,
        created_after: Optional[Any] = None,
        start_time_at_or_after: Optional[Any] = None,
        start_time_before: Optional[Any] = None,
        on_behalf_of_content_owner: Optional[str] = None,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        fields: Optional[str] = None,
        max_pages: Optional[int] = None,
    ) -> List[Report]:
        paginator = self.iter_reports(
            job_id,
            created_after=created_after,
            start_time_at_or_after=start_time_at_or_after,
            start_time_before=start_time_before,
            on_behalf_of_content_owner=on_behalf_of_content_owner,
            page_size=page_size,
            page_token=page_token,
            fields=fields,
        )
        return self._collect(paginator, max_pages)

    def list_report_types(
        self,
        *,
        include_system_managed: Optional[bool] = None,
        on_behalf_of_content_owner: Optional[str] = None,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        fields: Optional[str] = None,
    ) -> ListReportTypesResponse:
        request = operations.report_types_list(
            include_system_managed=include_system_managed,
            on_behalf_of_content_owner=self._owner(on_behalf_of_content_owner),
            page_size=page_size,
            page_token=page_token,
            fields=fields,
        )
        return self.execute(request)

    def iter_report_types(
        self,
        *,
        include_system_managed: Optional[bool] = None,
        on_behalf_of_content_owner: Optional[str] = None,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        fields: Optional[str] = None,
    ) -> Paginator[ReportType]:
        request = operations.report_types_list(
            include_system_managed=include_system_managed,
            on_behalf_of_content_owner=self._owner(on_behalf_of_content_owner),
            page_token=page_token,
            fields=fields,
        )
        return self.paginate(request, page_size=page_size)

    def list_all_report_types(
        self,
        *,
        include_system_managed: Optional[bool] = None,
        on_behalf_of_content_owner: Optional[str] = None,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        fields: Optional[str] = None,
        max_pages: Optional[int] = None,
    ) -> List[ReportType]:
        paginator = self.iter_report_types(
            include_system_managed=include_system_managed,
            on_behalf_of_content_owner=on_behalf_of_content_owner,
            page_size=page_size,
            page_token=page_token,
            fields=fields,
        )
        return self._collect(paginator, max_pages)

    def get_media(self, resource_name: str, *, fields: Optional[str] = None) -> Media:
        return self.execute(operations.media_download(resource_name, fields=fields))

    def download_media(self, resource_name: str) -> bytes:
        return self.execute(operations.media_download_data(resource_name))
