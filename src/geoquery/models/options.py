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

"""
Option models for the PostGIS facade, one per operation.

A field left unset takes its default; a field explicitly set to None stays
None, which for optional clauses means "omit the clause". Identifier and
expression fields are inserted into the SQL text verbatim.
"""

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from typing import Any, List, Mapping, Optional, Type, TypeVar, Union

from geoquery.db.exceptions import InvalidFormatError

Number = Union[int, float]
SqlLiteral = Union[int, float, str]
Bounds = Union[str, List[Number]]


class QueryOptions(BaseModel):
    """Common base: unknown keys are ignored, instances are immutable."""
    model_config = ConfigDict(extra="ignore", frozen=True)


class ListTablesOptions(QueryOptions):
    filter: Optional[str] = Field(None, description="Raw SQL predicate appended with AND.")


class QueryTableOptions(QueryOptions):
    columns: str = "*"
    filter: Optional[str] = None
    group: Optional[str] = None
    sort: Optional[str] = None
    limit: Optional[Union[int, str]] = Field(100, description="Set to None to drop the LIMIT clause.")


class BboxOptions(QueryOptions):
    geom_column: str = "geom"
    srid: Union[int, str] = 4326
    filter: Optional[str] = None


class CentroidOptions(QueryOptions):
    force_on_surface: bool = Field(False, description="Use ST_PointOnSurface instead of ST_Centroid.")
    geom_column: str = "geom"
    srid: Union[int, str] = "4326"
    filter: Optional[str] = None


class IntersectFeatureOptions(QueryOptions):
    columns: str = "*"
    distance: SqlLiteral = "0"
    geom_column_from: str = "geom"
    geom_column_to: str = "geom"
    filter: Optional[str] = None
    sort: Optional[str] = None
    limit: Optional[Union[int, str]] = None


class IntersectPointOptions(QueryOptions):
    columns: str = "*"
    distance: SqlLiteral = "0"
    geom_column: str = "geom"
    filter: Optional[str] = None
    sort: Optional[str] = None
    limit: Optional[Union[int, str]] = 10


class GeoJSONOptions(QueryOptions):
    bounds: Optional[Bounds] = Field(None, description="'xmin,ymin,xmax,ymax' (EPSG:4326) or 'z,x,y' tile coordinates.")
    id_column: Optional[str] = None
    precision: int = Field(9, ge=0, description="Decimal digits kept by ST_AsGeoJSON.")
    geom_column: str = "geom"
    columns: Optional[str] = None
    filter: Optional[str] = None


class GeobufOptions(QueryOptions):
    bounds: Optional[Bounds] = None
    geom_column: str = "geom"
    columns: Optional[str] = None
    filter: Optional[str] = None


class MVTOptions(QueryOptions):
    columns: Optional[str] = None
    id_column: Optional[str] = Field(None, description="Feature id column passed to ST_AsMVT.")
    geom_column: str = "geom"
    filter: Optional[str] = None


class NearestOptions(QueryOptions):
    columns: str = "*"
    geom_column: str = "geom"
    filter: Optional[str] = None
    limit: Optional[Union[int, str]] = 10


class TransformPointOptions(QueryOptions):
    srid: Union[int, str] = 4326


O = TypeVar("O", bound=QueryOptions)


def resolve_options(model: Type[O], options: Optional[Union[O, Mapping[str, Any]]] = None, **overrides: Any) -> O:
    """
    Builds the options model for an operation.

    `options` may be an instance of `model`, any other option model, or a plain
    mapping; keyword overrides are applied on top. Only explicitly given values
    are carried over, so defaults still apply to everything else.
    """
    if isinstance(options, model) and not overrides:
        return options

    if isinstance(options, BaseModel):
        data = options.model_dump(exclude_unset=True)
    else:
        data = dict(options or {})
    data.update(overrides)

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidFormatError(f"Invalid {model.__name__}: {e}") from e
