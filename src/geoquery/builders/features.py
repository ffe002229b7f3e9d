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

# geoquery/builders/features.py

"""
Encoded feature output: GeoJSON features, Geobuf collections and Mapbox
Vector Tiles.

GeoJSON and Geobuf share one inner projection: the geometry reprojected to
EPSG:4326 as `geom` plus the requested columns, optionally restricted by a
filter and a bounds predicate. Bounds are given in EPSG:4326 (or as z,x,y
tile coordinates) and are reprojected to the table's native SRID, read from
its first non-null geometry, so the spatial index stays usable.
"""

from typing import List, Optional, Sequence, Union

from geoquery.builders import clauses
from geoquery.builders.coordinates import bounds_predicate, parse_bounds
from geoquery.models.sql import RawSQL

BoundsInput = Optional[Union[str, Sequence[Union[int, float]]]]


def _native_srid(table: str, geom_column: str, alias: str) -> str:
    return f"(SELECT ST_SRID({geom_column}) AS srid FROM {table} WHERE {geom_column} IS NOT NULL LIMIT 1) {alias}"


def geojson(
    table: str,
    bounds: BoundsInput = None,
    id_column: Optional[str] = None,
    precision: Union[int, str] = 9,
    geom_column: str = 'geom',
    columns: Optional[str] = None,
    filter: Optional[str] = None,
) -> RawSQL:
    """
    One row per feature, each holding a GeoJSON Feature object in `geojson`.

    `properties` carries every projected column except the geometry and the
    id column; the id column, when given, becomes the Feature `id`.
    """
    spatial = bounds_predicate(geom_column, parse_bounds(bounds))
    feature_id = f"'id', {id_column}," if id_column else ""
    drop_id = f"- '{id_column}'" if id_column else ""

    return RawSQL(f"""
    SELECT
      jsonb_build_object(
        'type', 'Feature',
        {feature_id}
        'geometry', ST_AsGeoJSON(geom, {int(precision)})::jsonb,
        'properties', to_jsonb(subq.*) - 'geom' {drop_id}
      ) AS geojson
    FROM (
      SELECT
        ST_Transform({geom_column}, 4326) as geom
        {clauses.select_extra(columns)}
        {clauses.select_extra(id_column)}
      FROM
        {table},
        {_native_srid(table, geom_column, 'a')}
      {clauses.where_all(filter, spatial)}
    ) as subq
    """)


def geobuf(
    table: str,
    bounds: BoundsInput = None,
    geom_column: str = 'geom',
    columns: Optional[str] = None,
    filter: Optional[str] = None,
) -> RawSQL:
    """The whole (filtered) table as a single Geobuf-encoded `st_asgeobuf` value."""
    spatial = bounds_predicate(geom_column, parse_bounds(bounds))
    srid_join = f",\n        {_native_srid(table, geom_column, 'sq')}" if spatial else ""

    return RawSQL(f"""
    SELECT
      ST_AsGeobuf(q, 'geom')
    FROM (
      SELECT
        ST_Transform({geom_column}, 4326) as geom
        {clauses.select_extra(columns)}
      FROM
        {table}{srid_join}
      {clauses.where_all(filter, spatial)}
    ) as q
    """)


def mvt(
    table: str,
    x: int,
    y: int,
    z: int,
    columns: Optional[str] = None,
    id_column: Optional[str] = None,
    geom_column: str = 'geom',
    filter: Optional[str] = None,
) -> RawSQL:
    """
    A Mapbox Vector Tile for tile (z, x, y), returned in the `mvt` column.

    The layer is named after the table, uses a 4096 extent, and takes the
    feature id from `id_column` when given.
    """
    envelope = f"ST_TileEnvelope({z}, {x}, {y})"
    mvt_args: List[str] = ["mvtgeom.*", f"'{table}'", "4096", "'geom'"]
    if id_column:
        mvt_args.append(f"'{id_column}'")

    return RawSQL(f"""
    WITH mvtgeom as (
      SELECT
        ST_AsMVTGeom(
          ST_Transform({geom_column}, 3857),
          {envelope}
        ) as geom
        {clauses.select_extra(columns)}
        {clauses.select_extra(id_column)}
      FROM
        {table},
        {_native_srid(table, geom_column, 'a')}
      WHERE
        ST_Intersects(
          {geom_column},
          ST_Transform(
            {envelope},
            srid
          )
        )
        {clauses.and_(filter)}
    )
    SELECT ST_AsMVT({', '.join(mvt_args)}) AS mvt
    FROM mvtgeom
    """)
