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

import os
import sys
import logging
from typing import Optional


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class GeoQueryConfig:
    """Environment-driven settings. Values are read once, when the class is defined."""
    database_url: Optional[str] = os.getenv("GEOQUERY_DATABASE_URL") or os.getenv("DATABASE_URL")
    log_level: str = os.getenv("GEOQUERY_LOG_LEVEL", "INFO").upper()
    log_sql: bool = _env_flag("GEOQUERY_LOG_SQL")

    def __repr__(self) -> str:
        url = "'********'" if self.database_url else None
        return f"GeoQueryConfig(database_url={url}, log_level={self.log_level!r}, log_sql={self.log_sql})"


def normalize_db_url(url: str, is_async: bool = True) -> str:
    """
    Normalizes a database URL for the async (asyncpg) or sync (psycopg2) driver.

    Fixes the protocol prefix and converts the SSL parameter name
    (asyncpg uses 'ssl', psycopg2 uses 'sslmode').
    """
    if not url:
        return url

    if is_async:
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        if "sslmode=" in url:
            url = url.replace("sslmode=", "ssl=")
    else:
        if url.startswith("postgresql+asyncpg://"):
            url = url.replace("postgresql+asyncpg://", "postgresql://", 1)
        if "ssl=" in url and "sslmode=" not in url:
            url = url.replace("ssl=", "sslmode=")

    return url


def configure_logging(level: Optional[str] = None) -> None:
    """
    Applies GEOQUERY_LOG_LEVEL (or `level`) to the root logger.

    Meant for scripts and applications; the library itself never configures
    logging.
    """
    level_name = (level or GeoQueryConfig.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )
