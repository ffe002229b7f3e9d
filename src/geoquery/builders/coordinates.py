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

import logging
import math
import re
from typing import List, Optional, Sequence, Union

from geoquery.db.exceptions import InvalidFormatError
from geoquery.models.sql import Point

logger = logging.getLogger(__name__)

# x,y are signed decimals with at least two digits, srid is exactly four digits.
_POINT_PATTERN = re.compile(r"(-?\d+\.?\d+),(-?\d+\.?\d+),(\d{4})")


def parse_point(point: str) -> Point:
    """
    Extracts (x, y, srid) from a string such as '73.70534,14.94202,4326'.

    The match is anchored at the start of the string only; trailing text is
    ignored. Raises InvalidFormatError when nothing matches.
    """
    match = _POINT_PATTERN.match(point) if isinstance(point, str) else None
    if not match:
        raise InvalidFormatError(f"Invalid point format: {point!r}. Expected 'x,y,srid' (e.g. '12.49,41.89,4326').")
    return Point(*match.groups())


def parse_bounds(bounds: Optional[Union[str, Sequence[Union[int, float]]]]) -> Optional[List[float]]:
    """
    Splits a comma-delimited bounds string into numbers.

    Returns None for absent or empty input. A blank token counts as 0
    ('1,,3,4' is 1,0,3,4). The length is not checked here:
    see `bounds_predicate` for how 3, 4 and other lengths are handled.
    """
    if not bounds:
        return None

    tokens = bounds.split(',') if isinstance(bounds, str) else list(bounds)
    values = []
    for token in tokens:
        if isinstance(token, str) and not token.strip():
            values.append(0.0)
            continue
        try:
            value = float(token)
        except (TypeError, ValueError) as e:
            raise InvalidFormatError(f"Invalid bounds value {token!r} in {bounds!r}.") from e
        if not math.isfinite(value):
            raise InvalidFormatError(f"Invalid bounds value {token!r} in {bounds!r}.")
        values.append(value)
    return values


def format_number(value: float) -> str:
    """Renders 3.0 as '3' so tile coordinates stay integer literals."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def bounds_predicate(geom_column: str, bounds: Optional[List[float]], srid_ref: str = "srid") -> Optional[str]:
    """
    Spatial predicate for parsed bounds, expressed in the table's native SRID.

    4 values are an EPSG:4326 envelope (xmin, ymin, xmax, ymax), 3 values are
    tile coordinates (z, x, y). Any other length yields no predicate at all;
    the bounds are accepted and silently ignored.
    """
    if not bounds:
        return None

    joined = ",".join(format_number(v) for v in bounds)
    if len(bounds) == 4:
        envelope = f"ST_MakeEnvelope({joined}, 4326)"
    elif len(bounds) == 3:
        envelope = f"ST_TileEnvelope({joined})"
    else:
        logger.warning(f"Ignoring bounds with {len(bounds)} values (expected 3 or 4): no spatial filter applied.")
        return None

    return f"""{geom_column} &&
        ST_Transform(
          {envelope},
          {srid_ref}
        )"""
