"""CLI entrypoint for the Waifu Vault client."""

import argparse
import logging
import sys
from pathlib import Path

from .api import WaifuClient
from .builder import UploadRequest
from .errors import WaifuVaultError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Waifu Vault client")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--api-url", help="REST endpoint (default: $WAIFUVAULT_API_URL or waifuvault.moe)")
    commands = parser.add_subparsers(dest="command", required=True)

    upload = commands.add_parser("upload", help="Upload a file or a URL")
    source = upload.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", type=Path, help="Local file to upload")
    source.add_argument("--url", help="Remote URL for the service to fetch")
    upload.add_argument("--bucket", help="Bucket token to upload into")
    upload.add_argument("--expires", help="Expiry such as 30m, 1h or 2d")
    upload.add_argument("--password", help="Protect the file with a password")
    upload.add_argument("--hide-filename", action="store_true", help="Hide the filename in the URL")
    upload.add_argument("--one-time-download", action="store_true", help="Delete after first download")

    info = commands.add_parser("info", help="Show file information")
    info.add_argument("token")
    info.add_argument("--formatted", action="store_true", help="Human readable retention period")

    delete = commands.add_parser("delete", help="Delete a file")
    delete.add_argument("token")

    download = commands.add_parser("download", help="Download a file")
    download.add_argument("url")
    download.add_argument("--output", type=Path, required=True, help="Where to write the file")
    download.add_argument("--password", help="Password of a protected file")

    commands.add_parser("create-bucket", help="Create a new bucket")
    return parser


def run(client: WaifuClient, args: argparse.Namespace) -> str:
    if args.command == "upload":
        request = UploadRequest.create(
            file=args.file,
            url=args.url,
            bucket=args.bucket,
            expires=args.expires,
            password=args.password,
            hide_filename=args.hide_filename,
            one_time_download=args.one_time_download,
        )
        entry = client.upload_file(request)
        return f"{entry.token} {entry.url}"

    if args.command == "info":
        entry = client.file_info(args.token, formatted=args.formatted)
        options = entry.options
        lines = [
            f"token: {entry.token}",
            f"url: {entry.url}",
            f"views: {entry.views}",
            f"retention: {entry.retention_period}",
        ]
        if entry.bucket:
            lines.append(f"bucket: {entry.bucket}")
        if options:
            lines.append(
                f"options: hide_filename={options.hide_filename} "
                f"one_time_download={options.one_time_download} protected={options.protected}"
            )
        return "\n".join(lines)

    if args.command == "delete":
        return "deleted" if client.delete_file(args.token) else "not deleted"

    if args.command == "download":
        content = client.download_file(args.url, args.password)
        args.output.write_bytes(content)
        return f"{len(content)} bytes written to {args.output}"

    bucket = client.create_bucket()
    return bucket.token


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s"
    )

    try:
        with WaifuClient(base_url=args.api_url) as client:
            print(run(client, args))
    except (WaifuVaultError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
