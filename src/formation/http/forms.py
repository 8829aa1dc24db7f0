"""Submitted form data and file uploads — URL-encoded and multipart.

``FormData`` is the flat multi-valued mapping a request body parses into.
Keys keep their wire names (``User[email]``, ``User[tags][]``);
``Form.process()`` scopes them to a model.

``FileUpload`` is the file-descriptor record validation rules inspect:
original name, temp path on disk, size, and upload error code.

``python-multipart`` is an optional dependency (``pip install formation[multipart]``).
URL-encoded forms use stdlib ``urllib.parse`` — no extra dependency.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO

# Upload error codes (same numbering PHP uses in $_FILES)
UPLOAD_OK = 0
UPLOAD_ERR_PARTIAL = 3
UPLOAD_ERR_NO_FILE = 4


@dataclass(frozen=True, slots=True)
class FileUpload:
    """An uploaded file, already written to a temporary location.

    ``error`` is zero for a complete upload. An empty ``tmp_path`` means no
    file was received for the field.
    """

    name: str
    tmp_path: str
    size: int
    error: int = UPLOAD_OK
    content_type: str = "application/octet-stream"

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> FileUpload:
        """Build from a raw descriptor dict.

        Accepts both ``tmp_path`` and PHP's ``tmp_name`` spelling, and
        ``type`` for the content type.
        """
        tmp_path = raw.get("tmp_path") or raw.get("tmp_name") or ""
        try:
            size = int(raw.get("size") or 0)
            error = int(raw.get("error") or 0)
        except (TypeError, ValueError):
            size, error = 0, UPLOAD_ERR_PARTIAL
        return cls(
            name=str(raw.get("name") or ""),
            tmp_path=str(tmp_path),
            size=size,
            error=error,
            content_type=str(raw.get("type") or raw.get("content_type") or "application/octet-stream"),
        )

    @property
    def uploaded(self) -> bool:
        """True when a file was received without error."""
        return bool(self.tmp_path) and self.error == UPLOAD_OK

    def read(self) -> bytes:
        """Return the file content as bytes."""
        return Path(self.tmp_path).read_bytes()

    def save(self, path: Path) -> None:
        """Copy the uploaded file to *path*. Parent directories must exist."""
        shutil.copyfile(self.tmp_path, path)

    def __repr__(self) -> str:
        return f"FileUpload({self.name!r}, {self.content_type!r}, {self.size} bytes)"


class FormData(Mapping[str, str]):
    """Immutable parsed form data.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    ``files`` holds uploads keyed by the same wire names.

    Usage::

        data = parse_form_data(body, content_type)
        form = Form(model="User")
        if form.process(data, data.files):
            ...
    """

    __slots__ = ("_data", "_files")

    def __init__(
        self,
        data: dict[str, list[str]],
        files: dict[str, FileUpload] | None = None,
    ) -> None:
        object.__setattr__(self, "_data", data)
        object.__setattr__(self, "_files", files or {})

    @property
    def files(self) -> Mapping[str, FileUpload]:
        """Uploaded files by wire name."""
        return self._files

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"FormData({{{items}}})"

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key* (checkboxes, multi-selects)."""
        return list(self._data.get(key, []))


def as_upload(value: Any) -> FileUpload | None:
    """Return *value* as a ``FileUpload`` if it is one or describes one.

    A mapping counts as a file descriptor when it has a ``tmp_path`` or
    ``tmp_name`` key. Anything else returns None.
    """
    if isinstance(value, FileUpload):
        return value
    if isinstance(value, Mapping) and ("tmp_path" in value or "tmp_name" in value):
        return FileUpload.from_mapping(value)
    return None


def split_key(key: str) -> tuple[str, str | None, bool]:
    """Split a wire name into ``(model, field, is_list)``.

    ``"User[tags][]"`` → ``("User", "tags", True)``;
    ``"User[email]"`` → ``("User", "email", False)``;
    ``"plain"`` → ``("plain", None, False)``.
    """
    is_list = key.endswith("[]")
    if is_list:
        key = key[:-2]
    head, sep, rest = key.partition("[")
    if not sep or not rest.endswith("]"):
        return key, None, is_list
    return head, rest[:-1], is_list


def parse_form_data(body: bytes, content_type: str) -> FormData:
    """Parse a request body into FormData.

    Supports:
    - ``application/x-www-form-urlencoded`` (stdlib, no extra dependency)
    - ``multipart/form-data`` (requires ``python-multipart``)

    Uploaded files are spooled to named temporary files; callers own their
    cleanup once the request is handled.

    Raises:
        ConfigurationError: If multipart parsing is needed but
            ``python-multipart`` is not installed.
        ValueError: If content type is not a supported form encoding.
    """
    ct_lower = content_type.lower().split(";")[0].strip()

    if ct_lower == "application/x-www-form-urlencoded":
        return _parse_urlencoded(body)

    if ct_lower == "multipart/form-data":
        return _parse_multipart(body, content_type)

    msg = f"Unsupported form content type: {content_type!r}"
    raise ValueError(msg)


def _parse_urlencoded(body: bytes) -> FormData:
    from urllib.parse import parse_qs

    parsed = parse_qs(body.decode("utf-8"), keep_blank_values=True)
    return FormData(parsed)


def _parse_multipart(body: bytes, content_type: str) -> FormData:
    """Parse multipart form data using python-multipart."""
    from formation.errors import ConfigurationError

    try:
        from multipart.multipart import MultipartParser, parse_options_header
    except ImportError:
        msg = (
            "Multipart form parsing requires the 'python-multipart' package. "
            "Install it with: pip install formation[multipart]"
        )
        raise ConfigurationError(msg) from None

    _, options = parse_options_header(content_type.encode("latin-1"))
    boundary = options.get(b"boundary")
    if boundary is None:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    collector = _PartCollector(parse_options_header)
    parser = MultipartParser(boundary, collector.callbacks())
    try:
        parser.write(body)
        parser.finalize()
        if collector.in_part:
            msg = "Multipart form data ended before the closing boundary"
            raise ValueError(msg)
    except BaseException:
        collector.discard()
        raise
    return FormData(collector.data, collector.files)


class _PartCollector:
    """Receives python-multipart callbacks and assembles fields and uploads.

    Text parts are buffered in memory; file parts go straight to a named
    temporary file, which the caller owns once parsing returns. When a
    field repeats, the last part wins and earlier temp files are removed.
    """

    def __init__(self, parse_options_header: Any) -> None:
        self._parse_options = parse_options_header
        self.data: dict[str, list[str]] = {}
        self.files: dict[str, FileUpload] = {}
        self._reset()
        self.in_part = False

    def callbacks(self) -> dict[str, Any]:
        return {
            "on_part_begin": self.on_part_begin,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
        }

    def discard(self) -> None:
        """Close the open spool and delete every temp file written so far."""
        self._drop_spool()
        for upload in self.files.values():
            _unlink(upload.tmp_path)
        self.files.clear()

    def _reset(self) -> None:
        self._headers: dict[str, str] = {}
        self._header_name = ""
        self._text = bytearray()
        self._spool: BinaryIO | None = None
        self._spooled = 0
        self._field: str | None = None
        self._filename: str | None = None

    def _drop_spool(self) -> None:
        if self._spool is not None:
            self._spool.close()
            _unlink(self._spool.name)
            self._spool = None

    def on_part_begin(self) -> None:
        self._reset()
        self.in_part = True

    def on_header_field(self, raw: bytes, start: int, end: int) -> None:
        self._header_name = raw[start:end].decode("latin-1").lower()

    def on_header_value(self, raw: bytes, start: int, end: int) -> None:
        value = raw[start:end].decode("latin-1")
        self._headers[self._header_name] = value
        if self._header_name != "content-disposition":
            return
        _, params = self._parse_options(value.encode("latin-1"))
        if b"name" in params:
            self._field = params[b"name"].decode("utf-8")
        if b"filename" in params:
            self._filename = params[b"filename"].decode("utf-8")

    def on_part_data(self, chunk: bytes, start: int, end: int) -> None:
        if not self._filename:
            self._text.extend(chunk[start:end])
            return
        if self._spool is None:
            self._spool = tempfile.NamedTemporaryFile(prefix="formation-", delete=False)  # noqa: SIM115
        self._spool.write(chunk[start:end])
        self._spooled += end - start

    def on_part_end(self) -> None:
        self.in_part = False
        if self._field is None:
            self._drop_spool()
            return
        if self._filename is None:
            self.data.setdefault(self._field, []).append(self._text.decode("utf-8", errors="replace"))
            return

        content_type = self._headers.get("content-type", "application/octet-stream")
        if self._spool is None:
            # A file input submitted without a selected file
            upload = FileUpload(
                name=self._filename,
                tmp_path="",
                size=0,
                error=UPLOAD_ERR_NO_FILE,
                content_type=content_type,
            )
        else:
            self._spool.close()
            upload = FileUpload(
                name=os.path.basename(self._filename),
                tmp_path=self._spool.name,
                size=self._spooled,
                content_type=content_type,
            )
            self._spool = None

        replaced = self.files.get(self._field)
        if replaced is not None:
            _unlink(replaced.tmp_path)
        self.files[self._field] = upload


def _unlink(path: str) -> None:
    if path:
        Path(path).unlink(missing_ok=True)
