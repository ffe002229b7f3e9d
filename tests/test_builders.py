import pytest

from geoquery import builders
from geoquery.db.exceptions import InvalidFormatError
from geoquery.models.sql import RawSQL

from conftest import POINT, normalize

POINT_IN_T = (
    "ST_Transform( st_setsrid(st_makepoint(73.70534, 14.94202), 4326), "
    "(SELECT ST_SRID(geom) FROM t LIMIT 1) )"
)
SRID_SUBQUERY = "(SELECT ST_SRID(geom) AS srid FROM t WHERE geom IS NOT NULL LIMIT 1)"


class TestCatalogQueries:

    def test_list_tables_without_filter(self):
        assert normalize(builders.list_tables()) == (
            "SELECT i.table_name, i.table_type, g.f_geometry_column as geometry_column, "
            "g.coord_dimension, g.srid, g.type "
            "FROM information_schema.tables i "
            "LEFT JOIN geometry_columns g ON i.table_name = g.f_table_name "
            "INNER JOIN information_schema.table_privileges p ON i.table_name = p.table_name "
            "AND p.grantee in (current_user, 'PUBLIC') AND p.privilege_type = 'SELECT' "
            "WHERE i.table_schema not in ('pg_catalog', 'information_schema') "
            "ORDER BY table_name"
        )

    def test_list_tables_with_filter(self):
        sql = normalize(builders.list_tables('srid = 4326'))
        assert "('pg_catalog', 'information_schema') AND srid = 4326 ORDER BY table_name" in sql

    def test_list_columns(self):
        assert normalize(builders.list_columns('roads')) == (
            "SELECT attname as field_name, typname as field_type "
            "FROM pg_namespace, pg_attribute, pg_type, pg_class "
            "WHERE pg_type.oid = atttypid AND pg_class.oid = attrelid AND "
            "relnamespace = pg_namespace.oid AND attnum >= 1 AND relname = 'roads'"
        )


class TestTableQueries:

    def test_query_table_default_limit(self):
        assert normalize(builders.query_table('t')) == "SELECT * FROM t LIMIT 100"

    def test_query_table_without_limit(self):
        assert normalize(builders.query_table('t', limit=None)) == "SELECT * FROM t"

    def test_query_table_zero_limit_is_absent(self):
        assert normalize(builders.query_table('t', limit=0)) == "SELECT * FROM t"

    def test_query_table_all_clauses_in_order(self):
        sql = builders.query_table('t', 'name', "\"state\" = 'GOA'", 'name', 'name DESC', 10)
        assert normalize(sql) == (
            "SELECT name FROM t WHERE \"state\" = 'GOA' GROUP BY name ORDER BY name DESC LIMIT 10"
        )

    def test_bbox(self):
        assert normalize(builders.bbox('t', filter='a=1')) == (
            "SELECT ST_Extent(ST_Transform(geom, 4326)) as bbox FROM t WHERE a=1"
        )

    def test_bbox_custom_column_and_srid(self):
        assert normalize(builders.bbox('t', 'shape', 3857)) == (
            "SELECT ST_Extent(ST_Transform(shape, 3857)) as bbox FROM t"
        )

    def test_centroid(self):
        assert normalize(builders.centroid('t', filter="column_name='name'")) == (
            "SELECT ST_X( ST_Transform( ST_Centroid( geom ), 4326) ) as x, "
            "ST_Y( ST_Transform( ST_Centroid( geom ), 4326) ) as y "
            "FROM t WHERE column_name='name'"
        )

    def test_centroid_on_surface(self):
        sql = normalize(builders.centroid('t', force_on_surface=True))
        assert sql.count('ST_PointOnSurface( geom )') == 2
        assert 'ST_Centroid' not in sql
        assert 'WHERE' not in sql


class TestSpatialQueries:

    def test_intersect_feature(self):
        sql = builders.intersect_feature('a', 'b', filter="c='v'", sort='c ASC', limit=10)
        assert normalize(sql) == (
            "SELECT * FROM a, b WHERE ST_DWithin( a.geom, b.geom, 0 ) AND c='v' ORDER BY c ASC LIMIT 10"
        )

    def test_intersect_feature_zero_distance_is_kept(self):
        sql = normalize(builders.intersect_feature('a', 'b', distance=0))
        assert sql == "SELECT * FROM a, b WHERE ST_DWithin( a.geom, b.geom, 0 )"

    def test_intersect_feature_custom_columns(self):
        sql = normalize(builders.intersect_feature('a', 'b', 'a.id, b.id', 25.5, 'g1', 'g2'))
        assert sql == "SELECT a.id, b.id FROM a, b WHERE ST_DWithin( a.g1, b.g2, 25.5 )"

    def test_intersect_point(self):
        sql = builders.intersect_point('t', POINT, filter="c='v'", sort='c ASC', limit=10)
        assert normalize(sql) == (
            f"SELECT * FROM t WHERE ST_DWithin( geom, {POINT_IN_T}, 0 ) AND c='v' ORDER BY c ASC LIMIT 10"
        )

    def test_intersect_point_rejects_bad_point(self):
        with pytest.raises(InvalidFormatError):
            builders.intersect_point('t', 'here')

    def test_nearest(self):
        assert normalize(builders.nearest('t', POINT)) == (
            f"SELECT *, ST_Distance( {POINT_IN_T}, geom ) as distance FROM t "
            f"ORDER BY geom <-> {POINT_IN_T} LIMIT 10"
        )

    def test_nearest_with_filter(self):
        sql = normalize(builders.nearest('t', POINT, 'name', filter='pop > 10', limit=3))
        assert sql.startswith("SELECT name, ST_Distance(")
        assert "FROM t WHERE pop > 10 ORDER BY geom <->" in sql
        assert sql.endswith("LIMIT 3")

    def test_transform_point(self):
        transformed = "ST_Transform( st_setsrid(st_makepoint(73.70534, 14.94202), 4326), 3857 )"
        assert normalize(builders.transform_point(POINT, '3857')) == (
            f"SELECT ST_X( {transformed} ) as x, ST_Y( {transformed} ) as y"
        )

    def test_transform_point_rejects_bad_point(self):
        with pytest.raises(InvalidFormatError):
            builders.transform_point('invalid,point,format')


class TestFeatureQueries:

    def test_geojson_defaults(self):
        assert normalize(builders.geojson('t')) == (
            "SELECT jsonb_build_object( 'type', 'Feature', "
            "'geometry', ST_AsGeoJSON(geom, 9)::jsonb, "
            "'properties', to_jsonb(subq.*) - 'geom' ) AS geojson "
            f"FROM ( SELECT ST_Transform(geom, 4326) as geom FROM t, {SRID_SUBQUERY} a ) as subq"
        )

    def test_geojson_with_id_columns_filter_and_envelope(self):
        sql = normalize(builders.geojson('t', '1,2,3,4', 'gid', 6, 'geom', 'name', 'x = 1'))
        assert "'type', 'Feature', 'id', gid, 'geometry', ST_AsGeoJSON(geom, 6)::jsonb" in sql
        assert "to_jsonb(subq.*) - 'geom' - 'gid' ) AS geojson" in sql
        assert "ST_Transform(geom, 4326) as geom , name , gid FROM t" in sql
        assert "WHERE x = 1 AND geom && ST_Transform( ST_MakeEnvelope(1,2,3,4, 4326), srid ) ) as subq" in sql

    def test_geojson_tile_bounds(self):
        sql = normalize(builders.geojson('t', '3,4,2'))
        assert "WHERE geom && ST_Transform( ST_TileEnvelope(3,4,2), srid ) ) as subq" in sql

    def test_geojson_ignores_bounds_of_other_lengths(self):
        sql = normalize(builders.geojson('t', '1,2', filter='x = 1'))
        assert "WHERE x = 1 ) as subq" in sql
        assert 'ST_MakeEnvelope' not in sql
        assert 'ST_TileEnvelope' not in sql
        assert ' AND ' not in sql

    def test_geobuf_defaults(self):
        assert normalize(builders.geobuf('t')) == (
            "SELECT ST_AsGeobuf(q, 'geom') FROM ( SELECT ST_Transform(geom, 4326) as geom FROM t ) as q"
        )

    def test_geobuf_with_bounds_joins_native_srid(self):
        sql = normalize(builders.geobuf('t', '0,0,0', columns='name', filter='x = 1'))
        assert (
            f"SELECT ST_Transform(geom, 4326) as geom , name FROM t, {SRID_SUBQUERY} sq "
            "WHERE x = 1 AND geom && ST_Transform( ST_TileEnvelope(0,0,0), srid ) ) as q"
        ) in sql

    def test_geobuf_ignored_bounds_skip_srid_join(self):
        sql = normalize(builders.geobuf('t', '1,2,3,4,5'))
        assert ' sq ' not in sql
        assert 'WHERE' not in sql

    def test_mvt(self):
        assert normalize(builders.mvt('t', 0, 0, 0, columns='*', id_column='id')) == (
            "WITH mvtgeom as ( SELECT ST_AsMVTGeom( ST_Transform(geom, 3857), ST_TileEnvelope(0, 0, 0) ) as geom "
            f", * , id FROM t, {SRID_SUBQUERY} a "
            "WHERE ST_Intersects( geom, ST_Transform( ST_TileEnvelope(0, 0, 0), srid ) ) ) "
            "SELECT ST_AsMVT(mvtgeom.*, 't', 4096, 'geom', 'id') AS mvt FROM mvtgeom"
        )

    def test_mvt_with_filter_without_id(self):
        sql = normalize(builders.mvt('t', 1, 2, 3, filter='kind = 1'))
        assert "ST_TileEnvelope(3, 1, 2)" in sql
        assert "srid ) ) AND kind = 1 )" in sql
        assert sql.endswith("SELECT ST_AsMVT(mvtgeom.*, 't', 4096, 'geom') AS mvt FROM mvtgeom")


@pytest.mark.parametrize("build", [
    lambda: builders.list_tables(),
    lambda: builders.query_table('t'),
    lambda: builders.geojson('t', '1,2,3,4'),
    lambda: builders.nearest('t', POINT),
])
def test_builders_return_identical_raw_sql(build):
    first, second = build(), build()
    assert isinstance(first, RawSQL)
    assert first == second
