"""
REST implementation of the persistence gateway.

Talks to a PostgREST style endpoint (as exposed by hosted Postgres services)
under ``<url>/rest/v1/<table>``. The server assigns ids; creates ask for the
stored row back with ``Prefer: return=representation``.

``requests`` is blocking, so every call runs in the event loop's default
executor and the caller's coroutine stays the only thing that waits.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import threading
from typing import Any, Dict, List, Optional, TypeVar

import requests
import simplejson as json

from motorshop.domain import EntityKind

from . import codec
from .interface import EntityGateway, Gateway, GatewayError, LiveList

LOG = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT = 10.0

TABLES: Dict[EntityKind, str] = {
    EntityKind.COMPANY: "companies",
    EntityKind.MOTOR: "motors",
    EntityKind.JOB: "jobs",
}


class RestClient(object):
    """
    Thin wrapper around a requests session with the auth headers set.

    Calls arrive from executor threads; a lock keeps the session to one
    request at a time.
    """

    def __init__(self, url: str, apiKey: str, timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        if not url:
            raise ValueError("REST gateway needs a base url")
        self.baseUrl = url.rstrip("/") + "/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self._lock = threading.Lock()
        self.session.headers.update({
            "apikey": apiKey,
            "Authorization": "Bearer {}".format(apiKey),
            "Content-Type": "application/json; charset=UTF-8",
            "Accept": "application/json",
        })

    def _decode(self, response: requests.Response, what: str) -> Any:
        if not response.ok:
            raise GatewayError("{} failed with HTTP {}: {}".format(
                what, response.status_code, response.text[:200]))
        try:
            return json.loads(response.text)
        except json.JSONDecodeError as exc:
            raise GatewayError("{} returned invalid JSON".format(what), exc) from exc

    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        what = "POST {}".format(table)
        try:
            with self._lock:
                response = self.session.post(
                    "{}/{}".format(self.baseUrl, table),
                    data=json.dumps(row),
                    headers={"Prefer": "return=representation"},
                    timeout=self.timeout)
        except requests.RequestException as exc:
            raise GatewayError(what, exc) from exc
        body = self._decode(response, what)
        if isinstance(body, list):
            if not body:
                raise GatewayError("{} returned no row".format(what))
            body = body[0]
        return body

    def select(self, table: str) -> List[Dict[str, Any]]:
        what = "GET {}".format(table)
        try:
            with self._lock:
                response = self.session.get(
                    "{}/{}".format(self.baseUrl, table),
                    params={"select": "*", "order": "created_at.asc"},
                    timeout=self.timeout)
        except requests.RequestException as exc:
            raise GatewayError(what, exc) from exc
        body = self._decode(response, what)
        if not isinstance(body, list):
            raise GatewayError("{} did not return a list".format(what))
        return body

    def close(self):
        with self._lock:
            self.session.close()


async def _in_executor(func, *args):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(func, *args))


class RestEntityGateway(EntityGateway[T]):
    def __init__(self, client: RestClient, kind: EntityKind):
        self.kind = EntityKind(kind)
        self._client = client
        self._table = TABLES[self.kind]
        self._listing: LiveList[T] = LiveList(self.kind)

    async def create(self, record: T) -> T:
        row = codec.to_row(self.kind, record, include_id=False)
        stored_row = await _in_executor(self._client.insert, self._table, row)
        try:
            stored = codec.from_row(self.kind, stored_row)
        except (TypeError, ValueError) as exc:
            raise GatewayError(
                "Unexpected {} row from server".format(self.kind.value), exc) from exc
        if stored.id is None:
            raise GatewayError("Server did not assign an id to the new {}".format(
                self.kind.value))
        self._listing._append(stored)  # pylint: disable=protected-access
        LOG.info("Created %s %s via %s", self.kind.value, stored.id, self._table)
        return stored

    def listing(self) -> LiveList[T]:
        return self._listing

    async def reload(self) -> None:
        rows = await _in_executor(self._client.select, self._table)
        try:
            records = [codec.from_row(self.kind, row) for row in rows]
        except (TypeError, ValueError) as exc:
            raise GatewayError(
                "Unexpected {} row from server".format(self.kind.value), exc) from exc
        self._listing._replace(records)  # pylint: disable=protected-access
        LOG.debug("Loaded %d %s rows", len(records), self._table)


class RestGateway(Gateway):
    """
    Gateway over HTTP.

    Listings start empty; call :meth:`refresh` once the event loop is
    running to load them.
    """

    def __init__(self, url: str, apiKey: str, timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.client = RestClient(url, apiKey, timeout=timeout, session=session)
        self.companies = RestEntityGateway(self.client, EntityKind.COMPANY)
        self.motors = RestEntityGateway(self.client, EntityKind.MOTOR)
        self.jobs = RestEntityGateway(self.client, EntityKind.JOB)

    async def refresh(self) -> None:
        for gateway in (self.companies, self.motors, self.jobs):
            await gateway.reload()

    def close(self) -> None:
        self.client.close()
