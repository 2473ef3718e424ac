"""Sketch document container parsing.

A ``.sketch`` file is a zip archive:

- ``document.json`` — manifest (required)
- ``meta.json`` — metadata (optional, defaults to ``{}``)
- ``pages/*.json`` — one JSON document per page, in archive order

Any malformed entry fails the whole parse; there is no partial result.
"""

from __future__ import annotations

import io
import json
import zipfile
import zlib
from typing import Any

from sketchctx.domain.errors import InvalidFormatError
from sketchctx.domain.nodes import DocumentTree

MANIFEST_ENTRY = "document.json"
META_ENTRY = "meta.json"
PAGES_PREFIX = "pages/"


def _read_entry(archive: zipfile.ZipFile, name: str) -> bytes:
    # RuntimeError: encrypted entry; NotImplementedError: unsupported compression.
    try:
        return archive.read(name)
    except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError) as exc:
        msg = f"Invalid Sketch file: {name} is unreadable"
        raise InvalidFormatError(msg, details={"entry": name}) from exc


def _read_json(archive: zipfile.ZipFile, name: str) -> dict[str, Any]:
    raw = _read_entry(archive, name)
    try:
        value = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        msg = f"Invalid Sketch file: {name} is not valid JSON"
        raise InvalidFormatError(msg, details={"entry": name}) from exc
    if not isinstance(value, dict):
        msg = f"Invalid Sketch file: {name} is not a JSON object"
        raise InvalidFormatError(msg, details={"entry": name})
    return value


def parse_container(data: bytes) -> DocumentTree:
    """Unpack a Sketch archive into a :class:`DocumentTree`.

    Raises:
        InvalidFormatError: Not a zip archive, ``document.json`` missing,
            or any entry is corrupt or not valid JSON.
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as exc:
        raise InvalidFormatError("Invalid Sketch file: not a zip archive") from exc

    with archive:
        names = archive.namelist()
        if MANIFEST_ENTRY not in names:
            raise InvalidFormatError(f"Invalid Sketch file: {MANIFEST_ENTRY} not found")

        document = _read_json(archive, MANIFEST_ENTRY)
        meta = _read_json(archive, META_ENTRY) if META_ENTRY in names else {}
        pages = tuple(
            _read_json(archive, name)
            for name in names
            if name.startswith(PAGES_PREFIX) and not name.endswith("/")
        )

    return DocumentTree(document=document, meta=meta, pages=pages)


def build_container(
    document: dict[str, Any],
    *,
    meta: dict[str, Any] | None = None,
    pages: dict[str, dict[str, Any]] | None = None,
) -> bytes:
    """Build an in-memory Sketch archive (fixtures and round-trip checks).

    *pages* maps page ID to page JSON; each becomes ``pages/<id>.json``.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(MANIFEST_ENTRY, json.dumps(document))
        if meta is not None:
            archive.writestr(META_ENTRY, json.dumps(meta))
        for page_id, page in (pages or {}).items():
            archive.writestr(f"{PAGES_PREFIX}{page_id}.json", json.dumps(page))
    return buffer.getvalue()
