from config import settings
from tracks.pipelines import (
    FILTER_ONLY_FIELDS,
    build_search_filter,
    build_search_pipeline,
    build_search_projection,
    build_search_view,
)


def test_search_filter_empty_term_matches_everything():
    assert build_search_filter(None) == {}
    assert build_search_filter("") == {}


def test_search_filter_is_case_insensitive_or_over_three_fields():
    query = build_search_filter("  beat ")
    assert query == {
        "$or": [
            {"authorTitle": {"$regex": "beat", "$options": "i"}},
            {"albumTitle": {"$regex": "beat", "$options": "i"}},
            {"title": {"$regex": "beat", "$options": "i"}},
        ]
    }


def test_search_view_joins_author_and_album_collections():
    lookups = [stage["$lookup"] for stage in build_search_view() if "$lookup" in stage]
    assert [(l["from"], l["localField"]) for l in lookups] == [
        (settings.AUTHOR_COLLECTION, "author"),
        (settings.ALBUM_COLLECTION, "album"),
    ]
    # El join no pisa las referencias originales
    assert all(l["as"] not in ("author", "album") for l in lookups)


def test_search_projection_strips_filter_only_fields():
    projection = build_search_projection()["$project"]
    for field in ("__v", "updatedAt", *FILTER_ONLY_FIELDS):
        assert projection[field] == 0
    assert "createdAt" not in projection


def test_search_pipeline_order():
    stages = [next(iter(stage)) for stage in build_search_pipeline("x")]
    assert stages == ["$lookup", "$lookup", "$addFields", "$match", "$project", "$sort"]
    assert build_search_pipeline()[-1] == {"$sort": {"createdAt": -1}}
