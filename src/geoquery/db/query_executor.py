#    Copyright 2025 FAO
#
#    Licensed under the Apache License, Version 2.0 (the "License");
#    you may not use this file except in compliance with the License.
#    You may obtain a copy of the License at
#
#        http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS,
#    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#    See the License for the specific language governing permissions and
#    limitations under the License.
#
#    Author: Carlo Cancellieri (ccancellieri@gmail.com)
#    Company: FAO, Viale delle Terme di Caracalla, 00100 Rome, Italy
#    Contact: copyright@fao.org - http://fao.org/contact-us/terms/en/

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy.engine.result import Result
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from geoquery.config import GeoQueryConfig, normalize_db_url
from geoquery.db.exceptions import InvalidClientError, error_for
from geoquery.models.protocols import QueryClientProtocol, QueryResponse
from geoquery.models.sql import RawSQL

logger = logging.getLogger(__name__)

DbAsyncResource = Union[AsyncEngine, AsyncConnection]


def is_query_client(client: Any) -> bool:
    """True when `client` exposes a callable `query` attribute."""
    return client is not None and callable(getattr(client, "query", None))


def extract_rows(result: QueryResponse) -> List[Any]:
    """Reads the row sequence from a client response (`.rows` or `["rows"]`)."""
    if isinstance(result, Mapping):
        return result["rows"]
    if hasattr(result, "rows"):
        return result.rows
    raise TypeError(f"Client returned {type(result).__name__} without rows.")


async def execute_query(client: QueryClientProtocol, query: RawSQL) -> List[Any]:
    """
    Runs a built query through the client and returns its rows.

    This is the only place SQL text leaves geoquery. Any failure, whether
    raised by the client or found in its response, is re-raised as
    QueryExecutionError (or its SQLSTATE subclass) chained to the original.
    """
    if GeoQueryConfig.log_sql:
        logger.debug(f"Executing SQL: {' '.join(query.split())}")

    try:
        result = client.query(query)
        if inspect.isawaitable(result):
            result = await result
        rows = extract_rows(result)
    except Exception as e:
        logger.error(f"Query execution failed: {e}")
        raise error_for(e) from e

    logger.debug(f"Query returned {len(rows)} row(s).")
    return rows


# --- SQLAlchemy adapter ---

@dataclass(frozen=True)
class QueryResult:
    rows: List[Dict[str, Any]] = field(default_factory=list)


def _all_dicts(result: Result) -> List[Dict[str, Any]]:
    return [row._asdict() for row in result.all()]


class SQLAlchemyQueryClient:
    """
    Exposes an SQLAlchemy AsyncEngine or AsyncConnection as a query client.

    With an engine, every query runs on its own pooled connection; with a
    connection, queries run on it inside whatever transaction the caller
    manages. The SQL is sent with `exec_driver_sql`, unparsed by SQLAlchemy,
    so caller-supplied expressions reach the driver exactly as built.
    """

    def __init__(self, resource: DbAsyncResource, owns_engine: bool = False):
        if not isinstance(resource, (AsyncEngine, AsyncConnection)):
            raise InvalidClientError(
                f"SQLAlchemyQueryClient expects an AsyncEngine or AsyncConnection, got {type(resource).__name__}."
            )
        self.resource = resource
        self._owns_engine = owns_engine

    @classmethod
    def from_url(cls, url: Optional[str] = None, **engine_kwargs: Any) -> "SQLAlchemyQueryClient":
        """Creates an async engine for `url` (default: GeoQueryConfig.database_url)."""
        url = url or GeoQueryConfig.database_url
        if not url:
            raise InvalidClientError("No database URL given and GEOQUERY_DATABASE_URL / DATABASE_URL is not set.")
        engine = create_async_engine(normalize_db_url(url, is_async=True), **engine_kwargs)
        return cls(engine, owns_engine=True)

    async def query(self, sql: str) -> QueryResult:
        if isinstance(self.resource, AsyncEngine):
            async with self.resource.connect() as conn:
                result = await conn.exec_driver_sql(sql)
                return QueryResult(rows=_all_dicts(result))

        result = await self.resource.exec_driver_sql(sql)
        return QueryResult(rows=_all_dicts(result))

    async def dispose(self) -> None:
        """Disposes the engine if this client created it."""
        if self._owns_engine and isinstance(self.resource, AsyncEngine):
            await self.resource.dispose()
