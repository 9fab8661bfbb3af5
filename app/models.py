"""Pydantic models describing provider payloads and API read models."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class SearchResult(BaseModel):
    """Partial title record returned by the provider's search endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    type: str | None = None
    year: int | None = None
    tmdb_id: int | None = Field(
        default=None,
        validation_alias=AliasChoices("tmdb_id", "tmdbId"),
        serialization_alias="tmdbId",
    )
    tmdb_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("tmdb_type", "tmdbType"),
        serialization_alias="tmdbType",
    )
    image_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("image_url", "imageUrl"),
        serialization_alias="imageUrl",
    )


class TitleSource(BaseModel):
    """Where a title can be streamed, rented or bought."""

    model_config = ConfigDict(populate_by_name=True)

    source_id: int = Field(
        validation_alias=AliasChoices("source_id", "sourceId"),
        serialization_alias="sourceId",
    )
    name: str
    type: str | None = None
    region: str | None = None
    web_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("web_url", "webUrl"),
        serialization_alias="webUrl",
    )
    format: str | None = None
    price: float | None = None
    seasons: int | None = None
    episodes: int | None = None


class TitleDetail(BaseModel):
    """Full title record.

    Instances fetched from the provider are complete. Instances derived
    locally from a :class:`SearchResult`, or built as identifier-only stubs,
    leave ``similar_titles_ids`` and ``sources`` unset.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str | None = None
    original_title: str | None = Field(
        default=None,
        validation_alias=AliasChoices("original_title", "originalTitle"),
        serialization_alias="originalTitle",
    )
    type: str | None = None
    year: int | None = None
    tmdb_id: int | None = Field(
        default=None,
        validation_alias=AliasChoices("tmdb_id", "tmdbId"),
        serialization_alias="tmdbId",
    )
    tmdb_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("tmdb_type", "tmdbType"),
        serialization_alias="tmdbType",
    )
    imdb_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("imdb_id", "imdbId"),
        serialization_alias="imdbId",
    )
    poster: str | None = None
    plot_overview: str | None = Field(
        default=None,
        validation_alias=AliasChoices("plot_overview", "plotOverview"),
        serialization_alias="plotOverview",
    )
    runtime_minutes: int | None = Field(
        default=None,
        validation_alias=AliasChoices("runtime_minutes", "runtimeMinutes"),
        serialization_alias="runtimeMinutes",
    )
    release_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices("release_date", "releaseDate"),
        serialization_alias="releaseDate",
    )
    genre_names: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("genre_names", "genreNames"),
        serialization_alias="genreNames",
    )
    user_rating: float | None = Field(
        default=None,
        validation_alias=AliasChoices("user_rating", "userRating"),
        serialization_alias="userRating",
    )
    similar_titles_ids: list[int] | None = Field(
        default=None,
        validation_alias=AliasChoices("similar_titles", "similarTitlesIds"),
        serialization_alias="similarTitlesIds",
    )
    sources: list[TitleSource] | None = None

    @classmethod
    def from_search_result(cls, result: SearchResult) -> "TitleDetail":
        """Build a partial detail from the fields a search result already carries."""

        return cls(
            id=result.id,
            title=result.name,
            type=result.type,
            year=result.year,
            tmdb_id=result.tmdb_id,
            tmdb_type=result.tmdb_type,
            poster=result.image_url,
        )

    @classmethod
    def stub(cls, title_id: int) -> "TitleDetail":
        """Return an identifier-only detail."""

        return cls(id=title_id)


class Network(BaseModel):
    """A TV network known to the provider."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    origin_country: str | None = Field(
        default=None,
        validation_alias=AliasChoices("origin_country", "originCountry"),
        serialization_alias="originCountry",
    )
    tvmaze_id: int | None = Field(
        default=None,
        validation_alias=AliasChoices("tvmaze_id", "tvmazeId"),
        serialization_alias="tvmazeId",
    )


class MovieRecord(BaseModel):
    """A movie saved on a profile's wishlist."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    title: str
    watchmode_id: int | None = Field(default=None, serialization_alias="watchmodeId")
    profile_id: int = Field(serialization_alias="profileId")


class ProfileRecord(BaseModel):
    """A named viewing profile belonging to a client."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    client_id: int = Field(serialization_alias="clientId")
    movies: list[MovieRecord] = Field(default_factory=list)


class ClientRecord(BaseModel):
    """An account holding one or more profiles."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    email: str | None = None
    profiles: list[ProfileRecord] = Field(default_factory=list)
