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

from unittest.mock import AsyncMock, MagicMock

import pytest

from geoquery import PostGIS

POINT = '73.70534,14.94202,4326'


def normalize(sql: str) -> str:
    """Collapses all whitespace runs so SQL layout does not matter in assertions."""
    return " ".join(sql.split())


@pytest.fixture
def client():
    """A mocked database client answering every query with an empty row set."""
    mock = MagicMock()
    mock.query = AsyncMock(return_value={"rows": []})
    return mock


@pytest.fixture
def postgis(client):
    return PostGIS(client)


@pytest.fixture
def sent_sql(client):
    """Returns the normalized SQL of the last query sent to the mocked client."""
    def _sent():
        client.query.assert_awaited_once()
        return normalize(client.query.await_args.args[0])
    return _sent
