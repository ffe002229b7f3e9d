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

from typing import NamedTuple


class RawSQL(str):
    """
    SQL text built by direct interpolation, with no bind parameters.

    Table names, column names and filter/sort/group expressions inside it are
    caller-supplied and unescaped. Keeping this as its own type marks the
    injection-risk boundary: anything accepting a RawSQL is trusting its author.
    """

    def __repr__(self) -> str:
        return f"RawSQL({str.__repr__(self)})"


class Point(NamedTuple):
    """A point parsed from 'x,y,srid'. Values are kept as text for literal embedding."""
    x: str
    y: str
    srid: str
