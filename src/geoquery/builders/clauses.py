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
Optional SQL clause fragments.

Every helper returns an empty string when its driving value is falsy (None,
'', 0), so builders can splice the result into a template unconditionally.
"""

from typing import Any, Optional


def where(expression: Optional[str]) -> str:
    return f"WHERE {expression}" if expression else ""


def and_(expression: Optional[str]) -> str:
    return f"AND {expression}" if expression else ""


def group_by(expression: Optional[str]) -> str:
    return f"GROUP BY {expression}" if expression else ""


def order_by(expression: Optional[str]) -> str:
    return f"ORDER BY {expression}" if expression else ""


def limit(value: Any) -> str:
    return f"LIMIT {value}" if value else ""


def select_extra(expression: Optional[str]) -> str:
    """Appends extra projected columns after a leading select item."""
    return f", {expression}" if expression else ""


def where_all(*predicates: Optional[str]) -> str:
    """A single WHERE joining all present predicates with AND."""
    conditions = [p for p in predicates if p]
    if not conditions:
        return ""
    return "WHERE " + "\n        AND ".join(conditions)
