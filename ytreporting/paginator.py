from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Generic, Iterator, List, Optional, Set, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from ytreporting.request import Request
from ytreporting.services.transport import EventLogger, Transport, emit_event

T = TypeVar("T")

NEXT_TOKEN_FIELD = "nextPageToken"


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    next_token: Optional[str] = None


def response_field(response: Any, wire_name: str) -> Any:
    if isinstance(response, BaseModel):
        for name, info in type(response).model_fields.items():
            if wire_name in (name, info.alias, to_camel(name)):
                return getattr(response, name)
        return None
    if isinstance(response, dict):
        return response.get(wire_name)
    return getattr(response, wire_name, None)


class Paginator(Generic[T]):
    """Lazy item sequence over a list endpoint that pages with ``pageToken``/``nextPageToken``.

    Each fetch is one transport call; page k+1 is only requested once page k's
    token is known. A failed fetch leaves the state untouched, so calling
    ``next()`` again re-issues the same request.
    """

    def __init__(
        self,
        transport: Transport,
        request: Request,
        *,
        items_field: str,
        page_size: Optional[int] = None,
        logger: Optional[EventLogger] = None,
    ) -> None:
        self._transport = transport
        self._template = request
        self._items_field = items_field
        self._page_size = page_size if page_size is not None else request.query_value("pageSize")
        self._current_token: Optional[str] = request.query_value("pageToken")
        self._used_tokens: Set[str] = set()
        self._exhausted = False
        self._buffer: Deque[T] = deque()
        self._pages_fetched = 0
        self._logger = logger

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def current_token(self) -> Optional[str]:
        return self._current_token

    @property
    def pages_fetched(self) -> int:
        return self._pages_fetched

    def stop(self) -> None:
        """Refuse further fetches. Items of pages already fetched are still served."""
        self._exhausted = True

    def next_request(self) -> Request:
        return self._template.with_query(pageToken=self._current_token, pageSize=self._page_size)

    def _fetch(self) -> Page[T]:
        request = self.next_request()
        response = self._transport.execute(request)

        items = list(response_field(response, self._items_field) or [])
        next_token = response_field(response, NEXT_TOKEN_FIELD) or None
        if self._current_token is not None:
            self._used_tokens.add(self._current_token)
        repeated = next_token is not None and next_token in self._used_tokens

        self._pages_fetched += 1
        self._current_token = next_token
        self._exhausted = next_token is None or repeated
        emit_event(self._logger, {
            "event": "page_fetched",
            "operation_id": request.operation_id,
            "page_index": self._pages_fetched - 1,
            "item_count": len(items),
            "has_next_token": next_token is not None,
        })
        if repeated:
            emit_event(self._logger, {
                "event": "repeated_page_token",
                "operation_id": request.operation_id,
                "page_index": self._pages_fetched - 1,
            })
        return Page(items=items, next_token=next_token)

    def next_page(self) -> Optional[Page[T]]:
        """Return the next whole page, or ``None`` once the sequence is drained.

        Items buffered by item-wise iteration are returned first as a page of their own.
        """
        if self._buffer:
            page = Page(items=list(self._buffer), next_token=self._current_token)
            self._buffer.clear()
            return page
        if self._exhausted:
            return None
        return self._fetch()

    def pages(self) -> Iterator[Page[T]]:
        while True:
            page = self.next_page()
            if page is None:
                return
            yield page

    def __iter__(self) -> Paginator[T]:
        return self

    def __next__(self) -> T:
        while not self._buffer:
            if self._exhausted:
                raise StopIteration
            self._buffer.extend(self._fetch().items)
        return self._buffer.popleft()

    def next(self) -> T:
        return self.__next__()
