"""Request descriptions and their rendering into HTTP calls."""

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .errors import BuildError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileSource:
    """Upload a file read from local storage."""

    path: Path


@dataclass(frozen=True)
class UrlSource:
    """Let the service fetch the content from a remote URL."""

    url: str


@dataclass(frozen=True)
class BytesSource:
    """Upload an in-memory buffer under the given filename."""

    data: bytes
    filename: str


ContentSource = Union[FileSource, UrlSource, BytesSource]


@dataclass(frozen=True)
class UploadRequest:
    """Content to upload and the options to store it with.

    ``expires`` is a number followed by a unit (``m``, ``h`` or ``d``); leave
    it unset to keep the file as long as the retention policy allows.
    """

    source: ContentSource
    bucket: Optional[str] = None
    expires: Optional[str] = None
    password: Optional[str] = None
    hide_filename: bool = False
    one_time_download: bool = False

    @classmethod
    def from_file(cls, path: Union[str, Path], **options: Any) -> "UploadRequest":
        return cls(source=FileSource(Path(path)), **options)

    @classmethod
    def from_url(cls, url: str, **options: Any) -> "UploadRequest":
        return cls(source=UrlSource(url), **options)

    @classmethod
    def from_bytes(cls, data: bytes, filename: str, **options: Any) -> "UploadRequest":
        return cls(source=BytesSource(bytes(data), filename), **options)

    @classmethod
    def create(
        cls,
        file: Optional[Union[str, Path]] = None,
        url: Optional[str] = None,
        data: Optional[bytes] = None,
        filename: Optional[str] = None,
        **options: Any,
    ) -> "UploadRequest":
        """Build a request from whichever single content source is given."""
        given = [name for name, value in (("file", file), ("url", url), ("data", data)) if value is not None]
        if not given:
            raise BuildError("need either a file, url, or bytes to upload")
        if len(given) > 1:
            raise BuildError(f"only one content source allowed, got: {', '.join(given)}")
        if filename is not None and data is None:
            raise BuildError("a filename can only be given with bytes")

        if file is not None:
            return cls.from_file(file, **options)
        if url is not None:
            return cls.from_url(url, **options)
        if not filename:
            raise BuildError("a filename is required when uploading bytes")
        return cls.from_bytes(data, filename, **options)


@dataclass(frozen=True)
class ModificationRequest:
    """Changes to apply to a stored file. Unset fields are left alone."""

    token: str
    password: Optional[str] = None
    previous_password: Optional[str] = None
    custom_expiry: Optional[str] = None
    hide_filename: Optional[bool] = None

    def with_password(self, password: str, previous: Optional[str] = None) -> "ModificationRequest":
        if previous is None:
            return replace(self, password=password)
        return replace(self, password=password, previous_password=previous)

    def with_custom_expiry(self, expiry: str) -> "ModificationRequest":
        return replace(self, custom_expiry=expiry)

    def with_hide_filename(self, hide: bool) -> "ModificationRequest":
        return replace(self, hide_filename=hide)

    def to_payload(self) -> Dict[str, Any]:
        """JSON body holding only the fields that were set."""
        fields = {
            "password": self.password,
            "previousPassword": self.previous_password,
            "customExpiry": self.custom_expiry,
            "hideFilename": self.hide_filename,
        }
        return {key: value for key, value in fields.items() if value is not None}


@dataclass(frozen=True)
class HttpCall:
    """A rendered request, ready to hand to the transport.

    ``path`` is relative to the API base URL unless ``absolute`` is set.
    """

    method: str
    path: str
    params: Dict[str, str] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    json: Any = None
    data: Optional[Dict[str, str]] = None
    files: Optional[Dict[str, Tuple[str, bytes, str]]] = None
    absolute: bool = False


JSON_HEADERS = {"Content-Type": "application/json"}


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _read_file(path: Path) -> Tuple[str, bytes]:
    if not path.name:
        raise BuildError(f"invalid file path: {str(path)!r}")
    try:
        with open(path, "rb") as f:
            return path.name, f.read()
    except OSError as e:
        raise BuildError(f"reading file {path}: {e}") from e


def build_upload(request: UploadRequest) -> HttpCall:
    """Render an upload as a multipart, form or bucket scoped PUT."""
    params = {
        "hide_filename": _flag(request.hide_filename),
        "one_time_download": _flag(request.one_time_download),
    }
    if request.expires:
        params["expires"] = request.expires

    path = f"/{request.bucket}" if request.bucket else ""
    source = request.source

    if isinstance(source, UrlSource):
        data = {"url": source.url}
        if request.password is not None:
            data["password"] = request.password
        return HttpCall("PUT", path, params=params, data=data)

    if isinstance(source, FileSource):
        filename, content = _read_file(source.path)
    elif isinstance(source, BytesSource):
        filename, content = source.filename, source.data
    else:
        raise BuildError(f"unsupported content source: {source!r}")

    files = {"file": (filename, content, "application/octet-stream")}
    data = {"password": request.password} if request.password is not None else None
    logger.debug(f"Prepared upload of {filename} ({len(content)} bytes)")
    return HttpCall("PUT", path, params=params, data=data, files=files)


def build_file_info(token: str, formatted: bool = False) -> HttpCall:
    return HttpCall("GET", f"/{token}", params={"formatted": _flag(formatted)})


def build_modification(request: ModificationRequest) -> HttpCall:
    return HttpCall("PATCH", f"/{request.token}", headers=dict(JSON_HEADERS), json=request.to_payload())


def build_delete_file(token: str) -> HttpCall:
    return HttpCall("DELETE", f"/{token}")


def build_download(url: str, password: Optional[str] = None) -> HttpCall:
    headers = {"x-password": password} if password is not None else {}
    return HttpCall("GET", url, headers=headers, absolute=True)


# Buckets

def build_create_bucket() -> HttpCall:
    return HttpCall("GET", "/bucket/create")


def build_get_bucket(token: str) -> HttpCall:
    return HttpCall("POST", "/bucket/get", headers=dict(JSON_HEADERS), json={"bucket_token": token})


def build_delete_bucket(token: str) -> HttpCall:
    return HttpCall("DELETE", f"/bucket/{token}")


# Albums

def build_create_album(bucket_token: str, name: str) -> HttpCall:
    return HttpCall("POST", f"/album/{bucket_token}", headers=dict(JSON_HEADERS), json={"name": name})


def _file_tokens(tokens: Iterable[str]) -> List[str]:
    tokens = list(tokens)
    if not tokens:
        raise BuildError("at least one file token is required")
    return tokens


def build_associate(album_token: str, file_tokens: Iterable[str]) -> HttpCall:
    return HttpCall(
        "POST",
        f"/album/{album_token}/associate",
        headers=dict(JSON_HEADERS),
        json={"fileTokens": _file_tokens(file_tokens)},
    )


def build_disassociate(album_token: str, file_tokens: Iterable[str]) -> HttpCall:
    return HttpCall(
        "POST",
        f"/album/{album_token}/disassociate",
        headers=dict(JSON_HEADERS),
        json={"fileTokens": _file_tokens(file_tokens)},
    )


def build_delete_album(album_token: str, delete_files: bool = False) -> HttpCall:
    return HttpCall("DELETE", f"/album/{album_token}", params={"deleteFiles": _flag(delete_files)})


def build_get_album(token: str) -> HttpCall:
    return HttpCall("GET", f"/album/{token}")


def build_share_album(album_token: str) -> HttpCall:
    return HttpCall("GET", f"/album/share/{album_token}")


def build_revoke_album(album_token: str) -> HttpCall:
    return HttpCall("GET", f"/album/revoke/{album_token}")


def build_download_album(album_token: str, file_ids: Iterable[int] = ()) -> HttpCall:
    """An empty id list downloads the whole album."""
    return HttpCall(
        "POST",
        f"/album/download/{album_token}",
        headers=dict(JSON_HEADERS),
        json=list(file_ids),
    )
