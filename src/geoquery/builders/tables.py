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

# geoquery/builders/tables.py

from typing import Any, Optional, Union

from geoquery.builders import clauses
from geoquery.models.sql import RawSQL


def query_table(
    table: str,
    columns: str = '*',
    filter: Optional[str] = None,
    group: Optional[str] = None,
    sort: Optional[str] = None,
    limit: Any = 100,
) -> RawSQL:
    """Plain SELECT with optional WHERE, GROUP BY, ORDER BY and LIMIT."""
    return RawSQL(f"""
    SELECT
      {columns}
    FROM
      {table}
    {clauses.where(filter)}
    {clauses.group_by(group)}
    {clauses.order_by(sort)}
    {clauses.limit(limit)}
    """)


def bbox(
    table: str,
    geom_column: str = 'geom',
    srid: Union[int, str] = 4326,
    filter: Optional[str] = None,
) -> RawSQL:
    """Extent of all (filtered) geometries, reprojected to `srid`."""
    return RawSQL(f"""
    SELECT
      ST_Extent(ST_Transform({geom_column}, {srid})) as bbox
    FROM
      {table}
    {clauses.where(filter)}
    """)


def centroid(
    table: str,
    force_on_surface: bool = False,
    geom_column: str = 'geom',
    srid: Union[int, str] = '4326',
    filter: Optional[str] = None,
) -> RawSQL:
    """
    X/Y of each row's centroid in `srid`.

    With `force_on_surface` the point is taken with ST_PointOnSurface, which
    is guaranteed to lie on the geometry (useful for concave polygons).
    """
    point_fn = 'ST_PointOnSurface' if force_on_surface else 'ST_Centroid'
    center = f"""ST_Transform(
          {point_fn}(
            {geom_column}
          ), {srid})"""

    return RawSQL(f"""
    SELECT
      ST_X(
        {center}
      ) as x,
      ST_Y(
        {center}
      ) as y
    FROM
      {table}
    {clauses.where(filter)}
    """)
