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
Pure SQL builders. Each function returns RawSQL and has no side effects, so
they can be used on their own to inspect or log the SQL a facade call would run.
"""

from geoquery.builders.catalog import list_columns, list_tables
from geoquery.builders.coordinates import bounds_predicate, parse_bounds, parse_point
from geoquery.builders.features import geobuf, geojson, mvt
from geoquery.builders.spatial import intersect_feature, intersect_point, nearest, transform_point
from geoquery.builders.tables import bbox, centroid, query_table

__all__ = [
    "bbox",
    "bounds_predicate",
    "centroid",
    "geobuf",
    "geojson",
    "intersect_feature",
    "intersect_point",
    "list_columns",
    "list_tables",
    "mvt",
    "nearest",
    "parse_bounds",
    "parse_point",
    "query_table",
    "transform_point",
]
