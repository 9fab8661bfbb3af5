from app.models import SearchResult, TitleDetail


def test_title_detail_parses_watchmode_payload():
    detail = TitleDetail.model_validate(
        {
            "id": 345534,
            "title": "Heat",
            "original_title": "Heat",
            "type": "movie",
            "year": 1995,
            "imdb_id": "tt0113277",
            "tmdb_id": 949,
            "tmdb_type": "movie",
            "runtime_minutes": 170,
            "user_rating": 8.2,
            "similar_titles": [1307046, 1296220, 1104318],
            "networks": None,
            "trailer": "https://www.youtube.com/watch?v=example",
        }
    )

    assert detail.similar_titles_ids == [1307046, 1296220, 1104318]
    assert detail.imdb_id == "tt0113277"
    assert detail.sources is None
    assert detail.genre_names == []


def test_title_detail_from_search_result_copies_baseline_fields():
    result = SearchResult(
        id=10,
        name="Batman",
        type="movie",
        year=1989,
        tmdb_id=268,
        tmdb_type="movie",
        image_url="https://cdn.example.com/10.jpg",
    )

    detail = TitleDetail.from_search_result(result)

    assert detail.model_dump(by_alias=True, exclude_none=True) == {
        "id": 10,
        "title": "Batman",
        "type": "movie",
        "year": 1989,
        "tmdbId": 268,
        "tmdbType": "movie",
        "poster": "https://cdn.example.com/10.jpg",
        "genreNames": [],
    }
    assert detail.similar_titles_ids is None


def test_title_detail_stub_only_sets_identifier():
    stub = TitleDetail.stub(7)

    assert stub.model_fields_set == {"id"}
    assert stub.model_dump(exclude_unset=True) == {"id": 7}
