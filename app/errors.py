"""Error taxonomy shared by the resolvers and the transport layer."""

from __future__ import annotations


class MovieWishlistError(Exception):
    """Base class for errors reported back to API callers."""

    code = "INTERNAL_ERROR"

    def extensions(self) -> dict[str, object]:
        return {"code": self.code}


class InvalidArgument(MovieWishlistError, ValueError):
    """Raised when caller input is malformed, before any lookup happens."""

    code = "INVALID_ARGUMENT"


class UpstreamFetchError(MovieWishlistError):
    """The external metadata provider could not satisfy a request."""

    code = "UPSTREAM_FETCH_ERROR"

    def __init__(
        self,
        message: str,
        *,
        title_id: str | int | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.title_id = str(title_id) if title_id is not None else None
        self.status_code = status_code

    def extensions(self) -> dict[str, object]:
        data = super().extensions()
        if self.title_id is not None:
            data["titleId"] = self.title_id
        if self.status_code is not None:
            data["statusCode"] = self.status_code
        return data
