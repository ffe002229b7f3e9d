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

# geoquery/builders/spatial.py

"""
Point and proximity queries.

Point strings are parsed up front, so a malformed point raises
InvalidFormatError before any SQL exists.
"""

from typing import Any, Optional, Union

from geoquery.builders import clauses
from geoquery.builders.coordinates import parse_point
from geoquery.models.sql import Point, RawSQL


def _make_point(point: Point) -> str:
    return f"st_setsrid(st_makepoint({point.x}, {point.y}), {point.srid})"


def _point_in_table_srid(point: Point, table: str, geom_column: str) -> str:
    """The point reprojected into the SRID of the table's first geometry."""
    return f"""ST_Transform(
        {_make_point(point)},
        (SELECT ST_SRID({geom_column}) FROM {table} LIMIT 1)
      )"""


def intersect_feature(
    table_from: str,
    table_to: str,
    columns: str = '*',
    distance: Union[int, float, str] = '0',
    geom_column_from: str = 'geom',
    geom_column_to: str = 'geom',
    filter: Optional[str] = None,
    sort: Optional[str] = None,
    limit: Any = None,
) -> RawSQL:
    """Pairs of rows from two tables whose geometries lie within `distance`."""
    return RawSQL(f"""
    SELECT
      {columns}
    FROM
      {table_from},
      {table_to}
    WHERE
      ST_DWithin(
        {table_from}.{geom_column_from},
        {table_to}.{geom_column_to},
        {distance}
      )
      {clauses.and_(filter)}
    {clauses.order_by(sort)}
    {clauses.limit(limit)}
    """)


def intersect_point(
    table: str,
    point: str,
    columns: str = '*',
    distance: Union[int, float, str] = '0',
    geom_column: str = 'geom',
    filter: Optional[str] = None,
    sort: Optional[str] = None,
    limit: Any = 10,
) -> RawSQL:
    """Rows whose geometry lies within `distance` (table units) of `point`."""
    parsed = parse_point(point)
    return RawSQL(f"""
    SELECT
      {columns}
    FROM
      {table}
    WHERE
      ST_DWithin(
        {geom_column},
        {_point_in_table_srid(parsed, table, geom_column)},
        {distance}
      )
      {clauses.and_(filter)}
    {clauses.order_by(sort)}
    {clauses.limit(limit)}
    """)


def nearest(
    table: str,
    point: str,
    columns: str = '*',
    geom_column: str = 'geom',
    filter: Optional[str] = None,
    limit: Any = 10,
) -> RawSQL:
    """
    Rows ordered by distance to `point`, closest first.

    Ordering uses the index-assisted `<->` operator; the exact ST_Distance is
    returned as an extra `distance` column.
    """
    parsed = parse_point(point)
    target = _point_in_table_srid(parsed, table, geom_column)
    return RawSQL(f"""
    SELECT
      {columns},
      ST_Distance(
        {target},
        {geom_column}
      ) as distance
    FROM
      {table}
    {clauses.where(filter)}
    ORDER BY
      {geom_column} <-> {target}
    {clauses.limit(limit)}
    """)


def transform_point(point: str, srid: Union[int, str] = 4326) -> RawSQL:
    """X/Y of `point` reprojected from its own SRID to `srid`."""
    parsed = parse_point(point)
    transformed = f"""ST_Transform(
        {_make_point(parsed)},
        {srid}
      )"""
    return RawSQL(f"""
    SELECT
      ST_X(
        {transformed}
      ) as x,
      ST_Y(
        {transformed}
      ) as y
    """)
