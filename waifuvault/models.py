"""Data models for Waifu Vault API responses."""

from dataclasses import dataclass
from typing import Optional, Tuple, Union


def _mapping(value, what: str) -> dict:
    if not isinstance(value, dict):
        raise TypeError(f"{what} must be an object, got {type(value).__name__}")
    return value


def _integer(value, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{what} must be an integer, got {value!r}")
    return value


@dataclass(frozen=True)
class FileOptions:
    """Options applied to a stored file."""

    hide_filename: bool = False
    one_time_download: bool = False
    protected: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "FileOptions":
        data = _mapping(data, "options")
        return cls(
            hide_filename=bool(data.get("hideFilename", False)),
            one_time_download=bool(data.get("oneTimeDownload", False)),
            protected=bool(data.get("protected", False)),
        )


@dataclass(frozen=True)
class AlbumMetadata:
    """Album a file belongs to, as embedded in file and bucket responses."""

    token: str
    name: str
    bucket: str
    date_created: int
    public_token: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "AlbumMetadata":
        data = _mapping(data, "album")
        return cls(
            token=data["token"],
            name=data["name"],
            bucket=data["bucket"],
            date_created=data["dateCreated"],
            public_token=data.get("publicToken"),
        )


@dataclass(frozen=True)
class FileEntry:
    """A file stored in the vault."""

    token: str
    url: str
    views: int
    # Milliseconds, or a human readable string when requested as formatted
    retention_period: Union[int, str, None] = None
    bucket: Optional[str] = None
    album: Optional[AlbumMetadata] = None
    options: Optional[FileOptions] = None

    @classmethod
    def from_dict(cls, data: dict) -> "FileEntry":
        """Create FileEntry from API response dict."""
        data = _mapping(data, "file")
        album = data.get("album")
        options = data.get("options")
        return cls(
            token=data["token"],
            url=data["url"],
            views=_integer(data["views"], "views"),
            retention_period=data.get("retentionPeriod"),
            bucket=data.get("bucket"),
            album=AlbumMetadata.from_dict(album) if album is not None else None,
            options=FileOptions.from_dict(options) if options is not None else None,
        )


@dataclass(frozen=True)
class BucketEntry:
    """A bucket and the files it holds."""

    token: str
    files: Tuple[FileEntry, ...] = ()
    albums: Optional[Tuple[AlbumMetadata, ...]] = None

    @classmethod
    def from_dict(cls, data: dict) -> "BucketEntry":
        data = _mapping(data, "bucket")
        albums = data.get("albums")
        return cls(
            token=data["token"],
            files=tuple(FileEntry.from_dict(item) for item in data["files"]),
            albums=tuple(AlbumMetadata.from_dict(a) for a in albums) if albums is not None else None,
        )


@dataclass(frozen=True)
class AlbumEntry:
    """An album together with its files."""

    token: str
    bucket_token: str
    name: str
    files: Tuple[FileEntry, ...] = ()
    public_token: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "AlbumEntry":
        data = _mapping(data, "album")
        return cls(
            token=data["token"],
            bucket_token=data["bucketToken"],
            name=data["name"],
            files=tuple(FileEntry.from_dict(item) for item in data.get("files", [])),
            public_token=data.get("publicToken"),
        )


@dataclass(frozen=True)
class GenericMessage:
    """Plain success/failure answer, e.g. from sharing or deleting an album."""

    success: bool
    description: str

    @classmethod
    def from_dict(cls, data: dict) -> "GenericMessage":
        return cls(success=bool(data["success"]), description=data["description"])


@dataclass(frozen=True)
class ApiError:
    """Error envelope returned by the service."""

    name: str
    message: str
    status: int

    @classmethod
    def from_dict(cls, data: dict) -> "ApiError":
        return cls(name=data["name"], message=data["message"], status=_integer(data["status"], "status"))
