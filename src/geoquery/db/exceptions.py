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
This module defines the exceptions raised by geoquery. Input problems
(client handle, point and bounds strings, option values) are detected before
any SQL reaches the database; everything that fails afterwards is reported as
a QueryExecutionError or one of its SQLSTATE-specific subclasses.
"""

from typing import Optional


class GeoQueryError(Exception):
    """Base class for all geoquery exceptions."""
    pass


class InvalidClientError(GeoQueryError, TypeError):
    """Raised when the supplied database handle has no callable query() method."""
    def __init__(self, message: str = "A valid database client exposing an async query() method is required."):
        super().__init__(message)


class InvalidFormatError(GeoQueryError, ValueError):
    """Raised when a point, bounds string or option value cannot be parsed."""
    pass


class DatabaseError(GeoQueryError):
    """Base class for errors raised once a query has been handed to the client."""
    def __init__(self, message, original_exception: Optional[BaseException] = None):
        super().__init__(message)
        self.original_exception = original_exception
        self.details = str(original_exception) if original_exception else "No additional details."


class QueryExecutionError(DatabaseError):
    """Raised when the client's query call fails for any reason."""
    def __init__(self, reason: str, original_exception: Optional[BaseException] = None):
        super().__init__(f"Query execution failed: {reason}", original_exception=original_exception)
        self.reason = reason


# --- Specific PostgreSQL errors based on SQLSTATE ---

class TableNotFoundError(QueryExecutionError):
    """Raised when a query references a table that does not exist (pgcode: 42P01)."""
    pass


class ColumnNotFoundError(QueryExecutionError):
    """Raised when a query references a column that does not exist (pgcode: 42703)."""
    pass


class SQLSyntaxError(QueryExecutionError):
    """Raised when the built SQL (usually a caller-supplied expression) is malformed (pgcode: 42601)."""
    pass


class PermissionDeniedError(QueryExecutionError):
    """Raised when the database user has insufficient privileges (pgcode: 42501)."""
    pass


class DatabaseConnectionError(QueryExecutionError):
    """Raised when the connection to the database cannot be established or is lost."""
    pass


# See: https://www.postgresql.org/docs/current/errcodes-appendix.html
PGCODE_EXCEPTION_MAP = {
    '42P01': TableNotFoundError,
    '42703': ColumnNotFoundError,
    '42601': SQLSyntaxError,
    '42501': PermissionDeniedError,
    '08000': DatabaseConnectionError,
    '08003': DatabaseConnectionError,
    '08006': DatabaseConnectionError,
}


def get_pgcode(exc: BaseException) -> Optional[str]:
    """
    Extracts the PostgreSQL SQLSTATE from a driver exception.

    psycopg exposes it as `pgcode`, asyncpg as `sqlstate`; SQLAlchemy wraps the
    driver error and keeps it on `orig`.
    """
    for candidate in (exc, getattr(exc, 'orig', None)):
        if candidate is None:
            continue
        for attr in ('pgcode', 'sqlstate'):
            code = getattr(candidate, attr, None)
            if isinstance(code, str) and code:
                return code
    return None


def error_for(exc: BaseException) -> QueryExecutionError:
    """Wraps a client exception into the matching QueryExecutionError subclass."""
    exception_class = PGCODE_EXCEPTION_MAP.get(get_pgcode(exc), QueryExecutionError)
    return exception_class(str(exc), original_exception=exc)
