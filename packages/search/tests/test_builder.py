"""Tests for the FilterBuilder factory surface."""

from __future__ import annotations

import pytest

from cqrs_ddd_search import (
    BoolFilter,
    ExistsFilter,
    FilterBuilder,
    MissingFilter,
    NotFilter,
    OrFilter,
    RangeFilter,
    RawFilter,
    TermFilter,
    TermsFilter,
    UnsupportedFilterError,
)

# -- combinators -------------------------------------------------------------


def test_combine_and_inlines_conjunctions(builder: FilterBuilder):
    a, b, c = TermFilter("a", 1), TermFilter("b", 2), TermFilter("c", 3)
    inner = builder.combine_and(b, c)
    result = builder.combine_and(a, inner)
    assert result.must == (a, b, c)
    assert inner.must == (b, c)


def test_combine_and_inlines_every_conjunction(builder: FilterBuilder):
    a, b, c, d = (TermFilter(name, 1) for name in "abcd")
    result = builder.combine_and(
        builder.combine_and(a, b), c, builder.combine_and(d)
    )
    assert result.must == (a, b, c, d)


def test_combine_and_is_frozen(builder: FilterBuilder):
    assert builder.combine_and(TermFilter("a", 1)).frozen is True


def test_combine_or_keeps_children(builder: FilterBuilder):
    inner = builder.combine_or(TermFilter("a", 1), TermFilter("b", 2))
    result = builder.combine_or(inner, TermFilter("c", 3))
    assert isinstance(result, OrFilter)
    assert result.filters == (inner, TermFilter("c", 3))


@pytest.mark.parametrize("name", ["and", "AND", " and "])
def test_combine_dispatches_and(builder: FilterBuilder, name: str):
    assert isinstance(builder.combine(name, TermFilter("a", 1)), BoolFilter)


def test_combine_dispatches_or(builder: FilterBuilder):
    assert isinstance(builder.combine("or", TermFilter("a", 1)), OrFilter)


@pytest.mark.parametrize("name", ["xor", "nand", "andd", ""])
def test_combine_rejects_unknown_names(builder: FilterBuilder, name: str):
    with pytest.raises(UnsupportedFilterError) as exc_info:
        builder.combine(name, TermFilter("a", 1))
    assert str(exc_info.value) == f"Cannot build filter {name}"


def test_build_by_name(builder: FilterBuilder):
    assert builder.build("term", "status", "open") == TermFilter("status", "open")
    assert builder.build("gte", "age", 18) == RangeFilter("age", {"gte": 18})
    assert isinstance(builder.build("and", TermFilter("a", 1)), BoolFilter)
    assert builder.build("not", TermFilter("a", 1)) == NotFilter(TermFilter("a", 1))


def test_build_unknown_name(builder: FilterBuilder):
    with pytest.raises(UnsupportedFilterError):
        builder.build("fuzzy", "name", "jon")


@pytest.mark.parametrize("name", ["Term", " TERM ", "term"])
def test_build_ignores_case_and_space(builder: FilterBuilder, name: str):
    assert builder.build(name, "status", "open") == TermFilter("status", "open")


def test_build_rejects_keywords_for_combinators(builder: FilterBuilder):
    with pytest.raises(TypeError):
        builder.build("and", TermFilter("a", 1), minimum_should_match=1)
    with pytest.raises(TypeError):
        builder.build(" OR ", TermFilter("a", 1), boost=2)


def test_combinators_leave_caller_composites_mutable(builder: FilterBuilder):
    mine = builder.bool_().add_must(TermFilter("a", 1)).add_should(TermFilter("b", 2))
    mine_or = OrFilter([TermFilter("c", 3)])

    results = [
        builder.combine_and(mine, TermFilter("d", 4)),
        builder.combine_or(mine, mine_or),
        builder.not_(mine_or),
    ]
    assert all(r.frozen for r in results)

    mine.add_must_not(TermFilter("e", 5))
    mine_or.add_filter(TermFilter("f", 6))
    assert mine.frozen is False
    assert mine_or.frozen is False


# -- field comparisons -------------------------------------------------------


def test_range_helpers(builder: FilterBuilder):
    assert builder.gt("a", 1) == RangeFilter("a", {"gt": 1})
    assert builder.gte("a", 1) == RangeFilter("a", {"gte": 1})
    assert builder.lt("a", 1) == RangeFilter("a", {"lt": 1})
    assert builder.lte("a", 1) == RangeFilter("a", {"lte": 1})
    assert builder.between("a", 1, 5) == RangeFilter("a", {"gte": 1, "lte": 5})


def test_presence_helpers(builder: FilterBuilder):
    assert builder.exists("email") == ExistsFilter("email")
    assert builder.missing("email") == MissingFilter("email")


def test_terms_accepts_any_sequence(builder: FilterBuilder):
    assert builder.terms("tag", ["a", "b"]) == TermsFilter("tag", ("a", "b"))


def test_bool_is_mutable(builder: FilterBuilder):
    f = builder.bool_()
    f.add_must(TermFilter("a", 1)).add_should(TermFilter("b", 2))
    assert f.frozen is False
    assert len(f.children()) == 2


def test_not_is_frozen(builder: FilterBuilder):
    assert builder.not_(TermFilter("a", 1)).frozen is True


def test_prefix_and_regexp(builder: FilterBuilder):
    assert builder.prefix("name", "jo") == RawFilter("prefix", {"name": "jo"})
    assert builder.regexp("name", "jo.*", {"flags": "ALL"}) == RawFilter(
        "regexp", {"name": {"value": "jo.*", "flags": "ALL"}}
    )


# -- geo ---------------------------------------------------------------------


def test_geo_bounding_box(builder: FilterBuilder):
    f = builder.geo_bounding_box("location", [40.73, -74.1], [40.01, -71.12])
    assert f.name == "geo_bounding_box"
    assert f.body == {
        "location": {"top_left": [40.73, -74.1], "bottom_right": [40.01, -71.12]}
    }


def test_geo_distance_and_range(builder: FilterBuilder):
    assert builder.geo_distance("location", "dr5r9ydj2y73", "5km").body == {
        "distance": "5km",
        "location": "dr5r9ydj2y73",
    }
    assert builder.geo_distance_range("location", [40, -70], "5km", "10km").body == {
        "gte": "5km",
        "lte": "10km",
        "location": [40, -70],
    }


def test_geo_polygon(builder: FilterBuilder):
    points = [{"lat": 40, "lon": -70}, {"lat": 30, "lon": -80}, "20, -90"]
    assert builder.geo_polygon("location", points).body == {
        "location": {"points": points}
    }


def test_geo_shapes(builder: FilterBuilder):
    provided = builder.geo_shape("location", [[13.0, 53.0], [14.0, 52.0]])
    assert provided.body["location"]["shape"]["type"] == "envelope"

    indexed = builder.geo_shape_index("location", "DEU", "countries")
    assert indexed.body == {
        "location": {
            "indexed_shape": {
                "id": "DEU",
                "type": "countries",
                "index": "shapes",
                "path": "shape",
            }
        }
    }


def test_geo_hash_cell(builder: FilterBuilder):
    assert builder.geo_hash_cell("location", [40, -70]).body == {
        "location": [40, -70],
        "neighbors": False,
    }
    assert builder.geo_hash_cell("location", [40, -70], 3, True).body == {
        "location": [40, -70],
        "neighbors": True,
        "precision": 3,
    }


# -- structure ---------------------------------------------------------------


def test_nested_places_filters_and_queries(builder: FilterBuilder):
    by_filter = builder.nested("items", builder.term("items.sku", 7))
    assert by_filter.body == {"path": "items", "filter": TermFilter("items.sku", 7)}

    by_query = builder.nested("items", {"match": {"items.name": "lamp"}})
    assert by_query.body == {
        "path": "items",
        "query": {"match": {"items.name": "lamp"}},
    }


def test_parent_child(builder: FilterBuilder):
    child = builder.has_child(builder.term("tag", "x"), "comment")
    assert child.body == {"filter": TermFilter("tag", "x"), "type": "comment"}
    parent = builder.has_parent(builder.term("tag", "x"), "blog")
    assert parent.name == "has_parent"
    assert parent.body["type"] == "blog"


def test_misc_raw_filters(builder: FilterBuilder):
    assert builder.ids(["1", "2"]).body == {"values": ["1", "2"]}
    assert builder.ids(["1"], "user").body == {"values": ["1"], "type": "user"}
    assert builder.limit("10").body == {"value": 10}
    assert builder.match_all() == RawFilter("match_all", {})
    assert builder.type_("user") == RawFilter("type", {"value": "user"})
    assert builder.script("doc['n'].value > 1").body == {
        "script": "doc['n'].value > 1"
    }
    assert builder.query({"match": {"title": "x"}}).body == {"match": {"title": "x"}}
    assert builder.indices(builder.term("a", 1), ["logs"]).body == {
        "indices": ["logs"],
        "filter": TermFilter("a", 1),
    }
