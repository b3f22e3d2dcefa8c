"""Waifu Vault API client."""

import os
import logging
from typing import Any, Iterable, Optional

import httpx

from . import builder
from .builder import HttpCall, ModificationRequest, UploadRequest
from .dispatch import ResponseKind, dispatch
from .errors import (
    PasswordIncorrectError,
    PasswordRequiredError,
    ProtocolError,
    TransportError,
)
from .models import AlbumEntry, BucketEntry, FileEntry, GenericMessage

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://waifuvault.moe/rest"
DEFAULT_TIMEOUT = 60.0

FILE = (ResponseKind.FILE,)
DELETE = (ResponseKind.DELETE,)
BUCKET = (ResponseKind.BUCKET,)
ALBUM = (ResponseKind.ALBUM,)
GENERIC = (ResponseKind.GENERIC,)


class WaifuClient:
    """Waifu Vault REST API client.

    One ``httpx.Client`` is kept for the lifetime of the object, so a single
    instance can be shared by concurrent callers.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_url = (base_url or os.environ.get("WAIFUVAULT_API_URL") or DEFAULT_API_URL).rstrip("/")

        if timeout is None:
            raw = os.environ.get("WAIFUVAULT_TIMEOUT")
            try:
                timeout = float(raw) if raw else DEFAULT_TIMEOUT
            except ValueError:
                raise ValueError(f"WAIFUVAULT_TIMEOUT must be a number of seconds, got {raw!r}")
        self.timeout = timeout

        self._client = httpx.Client(timeout=self.timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "WaifuClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _send(self, call: HttpCall) -> httpx.Response:
        """Hand a rendered call to the transport."""
        url = call.path if call.absolute else f"{self.api_url}{call.path}"
        logger.debug(f"{call.method} {url}")

        try:
            return self._client.request(
                call.method,
                url,
                params=call.params or None,
                headers=call.headers or None,
                json=call.json,
                data=call.data,
                files=call.files,
            )
        except httpx.RequestError as e:
            logger.warning(f"Request failed: {call.method} {url}: {e}")
            raise TransportError(f"{call.method} {url} failed: {e}") from e

    def _decode(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            if response.is_success:
                raise ProtocolError("response body is not JSON", response.text) from e
            logger.warning(f"API returned {response.status_code} without a readable body")
            raise TransportError(
                f"service returned {response.status_code} with an unreadable body",
                status=response.status_code,
            ) from e

    def _call(self, call: HttpCall, expected: Iterable[ResponseKind]) -> Any:
        response = self._send(call)
        return dispatch(self._decode(response), expected)

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Raise the service's error for a failed binary download."""
        if response.status_code == 200:
            return
        dispatch(self._decode(response), ())

    # Files

    def upload_file(self, request: UploadRequest) -> FileEntry:
        """Upload content from a file, a URL or raw bytes."""
        return self._call(builder.build_upload(request), FILE)

    def file_info(self, token: str, formatted: bool = False) -> FileEntry:
        """Get information about a stored file.

        With ``formatted`` the retention period comes back as a human readable
        string instead of milliseconds.
        """
        return self._call(builder.build_file_info(token, formatted), FILE)

    def update_file(self, request: ModificationRequest) -> FileEntry:
        """Change the password, expiry or filename visibility of a stored file."""
        return self._call(builder.build_modification(request), FILE)

    def delete_file(self, token: str) -> bool:
        return self._call(builder.build_delete_file(token), DELETE)

    def download_file(self, url: str, password: Optional[str] = None) -> bytes:
        """Download a file and return its content.

        Raises PasswordRequiredError or PasswordIncorrectError when the
        service refuses access to a protected file.
        """
        response = self._send(builder.build_download(url, password))
        if response.status_code == 403:
            # Not always a JSON body here
            if password is not None:
                raise PasswordIncorrectError()
            raise PasswordRequiredError()
        self._raise_for_status(response)
        return response.content

    # Buckets

    def create_bucket(self) -> BucketEntry:
        return self._call(builder.build_create_bucket(), BUCKET)

    def get_bucket(self, token: str) -> BucketEntry:
        return self._call(builder.build_get_bucket(token), BUCKET)

    def delete_bucket(self, token: str) -> bool:
        """Delete a bucket and every file in it."""
        return self._call(builder.build_delete_bucket(token), DELETE)

    # Albums

    def create_album(self, bucket_token: str, name: str) -> AlbumEntry:
        return self._call(builder.build_create_album(bucket_token, name), ALBUM)

    def associate_files(self, album_token: str, file_tokens: Iterable[str]) -> AlbumEntry:
        return self._call(builder.build_associate(album_token, file_tokens), ALBUM)

    def disassociate_files(self, album_token: str, file_tokens: Iterable[str]) -> AlbumEntry:
        return self._call(builder.build_disassociate(album_token, file_tokens), ALBUM)

    def delete_album(self, album_token: str, delete_files: bool = False) -> GenericMessage:
        """Delete an album, and optionally the files in it."""
        return self._call(builder.build_delete_album(album_token, delete_files), GENERIC)

    def get_album(self, token: str) -> AlbumEntry:
        """Get an album by its private or public token."""
        return self._call(builder.build_get_album(token), ALBUM)

    def share_album(self, album_token: str) -> GenericMessage:
        """Make an album public. The description holds the public URL."""
        return self._call(builder.build_share_album(album_token), GENERIC)

    def revoke_album(self, album_token: str) -> GenericMessage:
        return self._call(builder.build_revoke_album(album_token), GENERIC)

    def download_album(self, album_token: str, file_ids: Iterable[int] = ()) -> bytes:
        """Download an album, or the given files from it, as a zip archive."""
        response = self._send(builder.build_download_album(album_token, file_ids))
        self._raise_for_status(response)
        return response.content

