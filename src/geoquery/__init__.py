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

from geoquery.db.exceptions import (
    DatabaseError,
    GeoQueryError,
    InvalidClientError,
    InvalidFormatError,
    QueryExecutionError,
)
from geoquery.db.query_executor import QueryResult, SQLAlchemyQueryClient
from geoquery.facade import PostGIS
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
    QueryTableOptions,
    TransformPointOptions,
)
from geoquery.models.sql import Point, RawSQL

__version__ = "1.0.0"

__all__ = [
    "PostGIS",
    "SQLAlchemyQueryClient",
    "QueryResult",
    "RawSQL",
    "Point",
    "GeoQueryError",
    "InvalidClientError",
    "InvalidFormatError",
    "DatabaseError",
    "QueryExecutionError",
    "BboxOptions",
    "CentroidOptions",
    "GeobufOptions",
    "GeoJSONOptions",
    "IntersectFeatureOptions",
    "IntersectPointOptions",
    "ListTablesOptions",
    "MVTOptions",
    "NearestOptions",
    "QueryTableOptions",
    "TransformPointOptions",
]
