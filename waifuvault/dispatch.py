"""Classify Waifu Vault response envelopes and turn them into typed results.

Every endpoint answers with the same untagged JSON envelope, so the shape of
the body is the only way to tell a file from an album, a bucket, a plain
status message, an error, or the bare boolean sent back by delete calls.
Shapes are checked in a fixed order: an album carries ``token`` and ``files``
just like a bucket, so the album check has to run first.
"""

import enum
import logging
from typing import Any, Callable, Dict, FrozenSet, Iterable, Union

from .errors import ProtocolError, ServiceError
from .models import AlbumEntry, ApiError, BucketEntry, FileEntry, GenericMessage

logger = logging.getLogger(__name__)

Result = Union[FileEntry, BucketEntry, AlbumEntry, GenericMessage, bool]


class ResponseKind(enum.Enum):
    DELETE = "delete"
    FILE = "file"
    ALBUM = "album"
    BUCKET = "bucket"
    GENERIC = "generic"
    ERROR = "error"


def _has(body: dict, *keys: str) -> bool:
    return all(key in body for key in keys)


def classify(body: Any) -> ResponseKind:
    """Return the kind of envelope ``body`` is.

    Raises ProtocolError when no known shape matches.
    """
    if isinstance(body, bool):
        return ResponseKind.DELETE

    if isinstance(body, dict):
        if _has(body, "token", "url", "views"):
            return ResponseKind.FILE
        if _has(body, "token", "bucketToken"):
            return ResponseKind.ALBUM
        if _has(body, "token", "files"):
            return ResponseKind.BUCKET
        if _has(body, "success", "description") and "token" not in body:
            return ResponseKind.GENERIC
        if _has(body, "name", "message", "status"):
            return ResponseKind.ERROR

    logger.warning(f"Malformed response: {body!r}")
    raise ProtocolError("malformed response", body)


_CONVERTERS: Dict[ResponseKind, Callable[[Any], Result]] = {
    ResponseKind.DELETE: bool,
    ResponseKind.FILE: FileEntry.from_dict,
    ResponseKind.ALBUM: AlbumEntry.from_dict,
    ResponseKind.BUCKET: BucketEntry.from_dict,
    ResponseKind.GENERIC: GenericMessage.from_dict,
}


def convert(kind: ResponseKind, body: Any) -> Union[Result, ApiError]:
    """Build the model for an already classified body."""
    try:
        if kind is ResponseKind.ERROR:
            return ApiError.from_dict(body)
        return _CONVERTERS[kind](body)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning(f"Could not read {kind.value} response: {e!r}")
        raise ProtocolError(f"invalid {kind.value} response: {e!r}", body) from e


def dispatch(body: Any, expected: Iterable[ResponseKind]) -> Result:
    """Classify ``body`` and return it as one of the ``expected`` kinds.

    An error envelope is raised as ServiceError whatever the endpoint expects.
    Any other kind outside ``expected`` is a ProtocolError.
    """
    allowed: FrozenSet[ResponseKind] = frozenset(expected)
    kind = classify(body)
    logger.debug(f"Response classified as {kind.value}")

    if kind is ResponseKind.ERROR:
        error = convert(kind, body)
        raise ServiceError(error.name, error.message, error.status)

    if kind not in allowed:
        names = ", ".join(sorted(k.value for k in allowed))
        logger.warning(f"Unexpected {kind.value} response, expected one of: {names}")
        raise ProtocolError(f"unexpected {kind.value} response, expected {names}", body)

    return convert(kind, body)
