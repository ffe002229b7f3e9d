import pytest

from geoquery.builders.coordinates import bounds_predicate, format_number, parse_bounds, parse_point
from geoquery.db.exceptions import InvalidFormatError
from geoquery.models.sql import Point

from conftest import normalize


class TestParsePoint:

    def test_returns_text_components(self):
        assert parse_point('73.70534,14.94202,4326') == Point('73.70534', '14.94202', '4326')

    def test_negative_coordinates(self):
        point = parse_point('-73.5,-14.25,3857')
        assert point.x == '-73.5'
        assert point.y == '-14.25'
        assert point.srid == '3857'

    def test_integer_coordinates(self):
        assert parse_point('10,20,4326') == Point('10', '20', '4326')

    def test_trailing_text_is_ignored(self):
        assert parse_point('1.5,2.5,4326;DROP TABLE t') == Point('1.5', '2.5', '4326')

    @pytest.mark.parametrize("value", [
        'invalid,point,format',
        '1.5,2.5',
        '1.5,2.5,432',
        'a1.5,2.5,4326',
        ' 1.5,2.5,4326',
        '1.5;2.5;4326',
        '',
        None,
    ])
    def test_rejects_malformed_points(self, value):
        with pytest.raises(InvalidFormatError):
            parse_point(value)

    def test_invalid_format_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_point('nope')


class TestParseBounds:

    @pytest.mark.parametrize("value", [None, '', []])
    def test_absent_bounds(self, value):
        assert parse_bounds(value) is None

    def test_splits_on_commas(self):
        assert parse_bounds('-10.5,20,30,40.25') == [-10.5, 20.0, 30.0, 40.25]

    def test_accepts_sequences(self):
        assert parse_bounds([3, 4, 2]) == [3.0, 4.0, 2.0]

    def test_blank_tokens_count_as_zero(self):
        assert parse_bounds('1,,3, ,5') == [1.0, 0.0, 3.0, 0.0, 5.0]
        assert parse_bounds('1,,3,4') == [1.0, 0.0, 3.0, 4.0]

    def test_any_length_is_accepted(self):
        assert parse_bounds('1,2') == [1.0, 2.0]

    @pytest.mark.parametrize("value", ['1,two,3', '1,2,nan', '1,2,inf'])
    def test_rejects_non_numeric_tokens(self, value):
        with pytest.raises(InvalidFormatError):
            parse_bounds(value)


class TestBoundsPredicate:

    def test_four_values_make_an_envelope(self):
        predicate = bounds_predicate('geom', [1.0, 2.0, 3.5, 4.0])
        assert normalize(predicate) == 'geom && ST_Transform( ST_MakeEnvelope(1,2,3.5,4, 4326), srid )'

    def test_three_values_make_a_tile_envelope(self):
        predicate = bounds_predicate('the_geom', [5.0, 10.0, 12.0])
        assert normalize(predicate) == 'the_geom && ST_Transform( ST_TileEnvelope(5,10,12), srid )'

    @pytest.mark.parametrize("bounds", [[1.0], [1.0, 2.0], [1.0, 2.0, 3.0, 4.0, 5.0]])
    def test_other_lengths_add_no_predicate(self, bounds):
        assert bounds_predicate('geom', bounds) is None

    def test_absent_bounds_add_no_predicate(self):
        assert bounds_predicate('geom', None) is None

    def test_is_deterministic(self):
        assert bounds_predicate('geom', [1.0, 2.0, 3.0, 4.0]) == bounds_predicate('geom', [1.0, 2.0, 3.0, 4.0])


def test_format_number():
    assert format_number(3.0) == '3'
    assert format_number(-0.5) == '-0.5'
    assert format_number(12) == '12'
