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

# geoquery/facade.py

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

import orjson

from geoquery import builders
from geoquery.db.exceptions import InvalidClientError, QueryExecutionError
from geoquery.db.query_executor import execute_query, is_query_client
from geoquery.models.options import (
    BboxOptions,
    CentroidOptions,
    GeobufOptions,
    GeoJSONOptions,
    IntersectFeatureOptions,
    IntersectPointOptions,
    ListTablesOptions,
    MVTOptions,
    NearestOptions,
    QueryOptions,
    QueryTableOptions,
    TransformPointOptions,
    resolve_options,
)
from geoquery.models.protocols import QueryClientProtocol
from geoquery.models.sql import RawSQL

logger = logging.getLogger(__name__)

Options = Optional[Union[QueryOptions, Mapping[str, Any]]]
Row = Dict[str, Any]


def _decode_feature(value: Any) -> Any:
    # Drivers without a jsonb codec (asyncpg by default) hand back JSON text.
    if isinstance(value, (str, bytes, bytearray, memoryview)):
        return orjson.loads(bytes(value) if isinstance(value, memoryview) else value)
    return value


def _unreadable_rows(operation: str, error: Exception) -> QueryExecutionError:
    logger.error(f"Query execution failed: unreadable {operation} row: {error!r}")
    return QueryExecutionError(f"unreadable {operation} row: {error!r}", original_exception=error)


class PostGIS:
    """
    Spatial read operations over a PostGIS database.

    Wraps a caller-owned client exposing `async query(sql)` that answers with
    the fetched rows (as `.rows` or `["rows"]`). Each method builds one SQL
    statement, runs it once, and returns the rows; `geojson` and `geobuf`
    reshape them first.

    Options can be passed as the operation's option model, a plain mapping, or
    keyword arguments; keywords win. Table names, columns and filter/sort/group
    expressions are inserted verbatim into the SQL: never pass untrusted input.

    Example:
        pg = PostGIS(SQLAlchemyQueryClient(engine))
        rows = await pg.nearest("cities", "12.49,41.89,4326", limit=5)
    """

    def __init__(self, client: QueryClientProtocol):
        if not is_query_client(client):
            raise InvalidClientError()
        self.client = client
        logger.info(f"PostGIS facade initialized with client {type(client).__name__}")

    async def list_tables(self, options: Options = None, **kwargs) -> List[Row]:
        opts = resolve_options(ListTablesOptions, options, **kwargs)
        return await self._execute_query(builders.list_tables(opts.filter))

    async def list_columns(self, table: str) -> List[Row]:
        return await self._execute_query(builders.list_columns(table))

    async def query_table(self, table: str, options: Options = None, **kwargs) -> List[Row]:
        opts = resolve_options(QueryTableOptions, options, **kwargs)
        query = builders.query_table(table, opts.columns, opts.filter, opts.group, opts.sort, opts.limit)
        return await self._execute_query(query)

    async def bbox(self, table: str, options: Options = None, **kwargs) -> List[Row]:
        opts = resolve_options(BboxOptions, options, **kwargs)
        return await self._execute_query(builders.bbox(table, opts.geom_column, opts.srid, opts.filter))

    async def centroid(self, table: str, options: Options = None, **kwargs) -> List[Row]:
        opts = resolve_options(CentroidOptions, options, **kwargs)
        query = builders.centroid(table, opts.force_on_surface, opts.geom_column, opts.srid, opts.filter)
        return await self._execute_query(query)

    async def intersect_feature(self, table_from: str, table_to: str, options: Options = None, **kwargs) -> List[Row]:
        opts = resolve_options(IntersectFeatureOptions, options, **kwargs)
        query = builders.intersect_feature(
            table_from, table_to, opts.columns, opts.distance,
            opts.geom_column_from, opts.geom_column_to, opts.filter, opts.sort, opts.limit,
        )
        return await self._execute_query(query)

    async def intersect_point(self, table: str, point: str, options: Options = None, **kwargs) -> List[Row]:
        opts = resolve_options(IntersectPointOptions, options, **kwargs)
        query = builders.intersect_point(
            table, point, opts.columns, opts.distance, opts.geom_column, opts.filter, opts.sort, opts.limit,
        )
        return await self._execute_query(query)

    async def geojson(self, table: str, options: Options = None, **kwargs) -> Dict[str, Any]:
        """Returns a GeoJSON FeatureCollection dict built from the `geojson` column of each row."""
        opts = resolve_options(GeoJSONOptions, options, **kwargs)
        query = builders.geojson(
            table, opts.bounds, opts.id_column, opts.precision, opts.geom_column, opts.columns, opts.filter,
        )
        rows = await self._execute_query(query)
        try:
            features = [_decode_feature(row['geojson']) for row in rows]
        except (KeyError, TypeError, orjson.JSONDecodeError) as e:
            raise _unreadable_rows('geojson', e) from e
        return {
            'type': 'FeatureCollection',
            'features': features,
        }

    async def geobuf(self, table: str, options: Options = None, **kwargs) -> Optional[bytes]:
        """Returns the Geobuf-encoded collection as the driver delivers it (bytes or buffer)."""
        opts = resolve_options(GeobufOptions, options, **kwargs)
        query = builders.geobuf(table, opts.bounds, opts.geom_column, opts.columns, opts.filter)
        rows = await self._execute_query(query)
        if not rows:
            logger.warning(f"geobuf query on '{table}' returned no rows.")
            return None
        try:
            return rows[0]['st_asgeobuf']
        except (KeyError, TypeError) as e:
            raise _unreadable_rows('geobuf', e) from e

    async def mvt(self, table: str, x: int, y: int, z: int, options: Options = None, **kwargs) -> List[Row]:
        opts = resolve_options(MVTOptions, options, **kwargs)
        query = builders.mvt(table, x, y, z, opts.columns, opts.id_column, opts.geom_column, opts.filter)
        return await self._execute_query(query)

    async def nearest(self, table: str, point: str, options: Options = None, **kwargs) -> List[Row]:
        opts = resolve_options(NearestOptions, options, **kwargs)
        query = builders.nearest(table, point, opts.columns, opts.geom_column, opts.filter, opts.limit)
        return await self._execute_query(query)

    async def transform_point(self, point: str, options: Options = None, **kwargs) -> List[Row]:
        opts = resolve_options(TransformPointOptions, options, **kwargs)
        return await self._execute_query(builders.transform_point(point, opts.srid))

    async def _execute_query(self, query: RawSQL) -> List[Row]:
        return await execute_query(self.client, query)
