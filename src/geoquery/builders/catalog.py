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

# geoquery/builders/catalog.py

from typing import Optional

from geoquery.builders import clauses
from geoquery.models.sql import RawSQL


def list_tables(filter: Optional[str] = None) -> RawSQL:
    """
    Tables readable by the current user (directly or through PUBLIC), with
    their geometry column metadata when they have one. System schemas are
    excluded.
    """
    return RawSQL(f"""
    SELECT
      i.table_name,
      i.table_type,
      g.f_geometry_column as geometry_column,
      g.coord_dimension,
      g.srid,
      g.type
    FROM
      information_schema.tables i
    LEFT JOIN geometry_columns g
    ON i.table_name = g.f_table_name
    INNER JOIN information_schema.table_privileges p
    ON i.table_name = p.table_name
    AND p.grantee in (current_user, 'PUBLIC')
    AND p.privilege_type = 'SELECT'
    WHERE
      i.table_schema not in ('pg_catalog', 'information_schema')
      {clauses.and_(filter)}
    ORDER BY table_name
    """)


def list_columns(table: str) -> RawSQL:
    """Column names and type names of `table`, read from the system catalogs."""
    return RawSQL(f"""
    SELECT
      attname as field_name,
      typname as field_type
    FROM
      pg_namespace, pg_attribute, pg_type, pg_class
    WHERE
      pg_type.oid = atttypid AND
      pg_class.oid = attrelid AND
      relnamespace = pg_namespace.oid AND
      attnum >= 1 AND
      relname = '{table}'
    """)
