"""Tests for the command line entrypoint."""

import httpx
import pytest

from conftest import error_body, file_body
from waifuvault import __main__ as cli
from waifuvault.api import WaifuClient


@pytest.fixture
def serve(monkeypatch):
    """Route the CLI's client through a handler answering with ``response``."""

    def install(response):
        seen = []

        def handler(request):
            seen.append(request)
            return response

        def factory(base_url=None):
            return WaifuClient(base_url=base_url or "https://vault.test/rest", transport=httpx.MockTransport(handler))

        monkeypatch.setattr(cli, "WaifuClient", factory)
        return seen

    return install


def test_upload_url(serve, capsys):
    seen = serve(httpx.Response(200, json=file_body("tok")))

    cli.main(["upload", "--url", "https://example.com/a.png", "--expires", "1h"])

    assert capsys.readouterr().out.strip() == "tok https://vault.test/f/tok/x.bin"
    assert seen[0].url.params["expires"] == "1h"


def test_info(serve, capsys):
    serve(httpx.Response(200, json=file_body("tok", bucket="bkt")))

    cli.main(["info", "tok", "--formatted"])

    out = capsys.readouterr().out
    assert "token: tok" in out
    assert "bucket: bkt" in out
    assert "protected=False" in out


def test_create_bucket(serve, capsys):
    serve(httpx.Response(200, json={"token": "bkt", "files": []}))

    cli.main(["create-bucket"])

    assert capsys.readouterr().out.strip() == "bkt"


def test_download(serve, tmp_path, capsys):
    serve(httpx.Response(200, content=b"abc"))
    target = tmp_path / "out.bin"

    cli.main(["download", "https://vault.test/f/tok/x.bin", "--output", str(target)])

    assert target.read_bytes() == b"abc"
    assert "3 bytes" in capsys.readouterr().out


def test_service_error_exits(serve, capsys):
    serve(httpx.Response(400, json=error_body(400, "BadRequestException", "Unknown token")))

    with pytest.raises(SystemExit) as exc:
        cli.main(["delete", "tok"])

    assert exc.value.code == 1
    assert "Unknown token" in capsys.readouterr().err


def test_unwritable_output_exits(serve, tmp_path, capsys):
    serve(httpx.Response(200, content=b"abc"))
    target = tmp_path / "missing-dir" / "out.bin"

    with pytest.raises(SystemExit) as exc:
        cli.main(["download", "https://vault.test/f/tok/x.bin", "--output", str(target)])

    assert exc.value.code == 1
    assert capsys.readouterr().err.startswith("Error:")
