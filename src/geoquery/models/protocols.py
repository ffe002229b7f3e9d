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

from typing import Any, List, Mapping, Protocol, Union, runtime_checkable


@runtime_checkable
class QueryResultProtocol(Protocol):
    """Anything carrying the fetched rows on a `rows` attribute."""

    @property
    def rows(self) -> List[Any]:
        ...


# A client may answer with an object exposing `.rows` or a mapping with a "rows" key.
QueryResponse = Union[QueryResultProtocol, Mapping[str, Any]]


@runtime_checkable
class QueryClientProtocol(Protocol):
    """
    Protocol for the database collaborator driven by the PostGIS facade.

    The client owns connections, credentials and transactions; geoquery only
    hands it SQL text and reads back the rows.
    """

    async def query(self, sql: str) -> QueryResponse:
        ...
