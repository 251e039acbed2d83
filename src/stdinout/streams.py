"""Stream selection: open a named file, or fall back to stdin/stdout when no path is given."""

from __future__ import annotations

import codecs
import logging
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import IO, BinaryIO, Iterable, Iterator, Optional, Union

logger = logging.getLogger(__name__)

# Conventional command-line marker for "use the standard stream"
DASH = "-"
DEFAULT_ENCODING = "utf-8"
DEFAULT_CHUNK_SIZE = 64 * 1024

PathArg = Union[str, Path, None]


class StreamKind(Enum):
    """Which variant a handle wraps."""

    FILE = "file"
    STANDARD = "standard"


def _resolve_arg(value: PathArg, dash_is_stdio: bool) -> Optional[Path]:
    """Map an optional CLI argument to a Path, or None for the standard stream."""
    if value is None:
        return None
    if dash_is_stdio and str(value) == DASH:
        return None
    # Any other value, "" included, names a file; opening it surfaces the OS error
    return Path(value)


class _TextStreamAdapter:
    """
    Byte-level view of a standard stream that has no binary buffer.

    Covers text-only replacements such as io.StringIO (embedding apps, IDLE) by encoding
    on read and decoding on write. A missing stream (None under pythonw) reads as empty
    and discards writes.
    """

    def __init__(self, stream: Optional[IO[str]]) -> None:
        self._stream = stream
        self._encoding = getattr(stream, "encoding", None) or DEFAULT_ENCODING
        self._decoder = codecs.getincrementaldecoder(self._encoding)()

    def read(self, size: int = -1) -> bytes:
        if self._stream is None:
            return b""
        return self._stream.read(size).encode(self._encoding)

    def readline(self, size: int = -1) -> bytes:
        if self._stream is None:
            return b""
        return self._stream.readline(size).encode(self._encoding)

    def write(self, data: bytes) -> int:
        # Incremental decoding keeps a multi-byte character split across chunks intact
        text = self._decoder.decode(data)
        if self._stream is not None and text:
            self._stream.write(text)
        return len(data)

    def writelines(self, lines: Iterable[bytes]) -> None:
        for line in lines:
            self.write(line)

    def flush(self) -> None:
        if self._stream is not None:
            self._stream.flush()


def _stdin_buffer() -> BinaryIO:
    # Looked up on every call so redirected sys.stdin (tests, embedding apps) is honoured
    buffer = getattr(sys.stdin, "buffer", None)
    if buffer is not None:
        return buffer
    return _TextStreamAdapter(sys.stdin)  # type: ignore[return-value]


def _stdout_buffer() -> BinaryIO:
    stream = sys.stdout
    if stream is None:
        return _TextStreamAdapter(None)  # type: ignore[return-value]
    # Flush text already queued on sys.stdout before writing bytes underneath it
    stream.flush()
    buffer = getattr(stream, "buffer", None)
    if buffer is not None:
        return buffer
    return _TextStreamAdapter(stream)  # type: ignore[return-value]


class StreamHandle:
    """
    Base for input and output handles.

    A handle either owns a file it opened (kind FILE) and closes it on close()/exit,
    or borrows a process standard stream (kind STANDARD) that it never closes.
    """

    _standard_name = "<std>"

    def __init__(self, stream: BinaryIO, kind: StreamKind, path: Optional[Path] = None) -> None:
        self._stream = stream
        self._kind = kind
        self._path = path
        self._closed = False

    @property
    def kind(self) -> StreamKind:
        return self._kind

    @property
    def path(self) -> Optional[Path]:
        """Path of the backing file; None for a standard stream."""
        return self._path

    @property
    def is_standard(self) -> bool:
        return self._kind is StreamKind.STANDARD

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def name(self) -> str:
        if self._path is not None:
            return str(self._path)
        return self._standard_name

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError(f"I/O operation on closed stream: {self.name}")

    def close(self) -> None:
        """Release the handle. Only file-backed handles close their stream."""
        if self._closed:
            return
        self._closed = True
        if self._kind is StreamKind.FILE:
            self._stream.close()
            logger.debug("Closed %s", self.name)

    def __enter__(self) -> StreamHandle:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<{type(self).__name__} {self._kind.value} {self.name!r} {state}>"


class InputHandle(StreamHandle):
    """Readable handle with the same byte- and line-oriented API for files and stdin."""

    _standard_name = "<stdin>"

    def __enter__(self) -> InputHandle:
        return self

    def read(self, size: int = -1) -> bytes:
        self._check_open()
        return self._stream.read(size)

    def readline(self, size: int = -1) -> bytes:
        self._check_open()
        return self._stream.readline(size)

    def __iter__(self) -> Iterator[bytes]:
        self._check_open()
        return iter(self._stream.readline, b"")

    def lines(self, encoding: Optional[str] = None) -> Iterator[str]:
        """Yield decoded lines without their line terminators."""
        enc = encoding or DEFAULT_ENCODING
        for raw in self:
            if raw.endswith(b"\n"):
                raw = raw[:-1]
                if raw.endswith(b"\r"):
                    raw = raw[:-1]
            yield raw.decode(enc)

    def read_text(self, encoding: Optional[str] = None) -> str:
        return self.read().decode(encoding or DEFAULT_ENCODING)


class OutputHandle(StreamHandle):
    """Writable handle with the same API for files and stdout."""

    _standard_name = "<stdout>"

    def __enter__(self) -> OutputHandle:
        return self

    def write(self, data: bytes) -> int:
        self._check_open()
        return self._stream.write(data)

    def writelines(self, lines: Iterable[bytes]) -> None:
        self._check_open()
        self._stream.writelines(lines)

    def write_text(self, text: str, encoding: Optional[str] = None) -> int:
        return self.write(text.encode(encoding or DEFAULT_ENCODING))

    def flush(self) -> None:
        self._check_open()
        self._stream.flush()

    def close(self) -> None:
        # Standard streams are flushed so output is not lost, but never closed
        if self._closed:
            return
        try:
            self._stream.flush()
        finally:
            super().close()


@dataclass(frozen=True)
class InputSource:
    """Where input comes from: a file path, or stdin when path is None. Nothing is opened yet."""

    path: Optional[Path] = None

    @classmethod
    def from_arg(cls, value: PathArg, dash_is_stdio: bool = True) -> InputSource:
        return cls(_resolve_arg(value, dash_is_stdio))

    @property
    def is_standard(self) -> bool:
        return self.path is None

    def open(self) -> InputHandle:
        """Open for reading. OSError from the OS propagates; there is no fallback to stdin."""
        if self.path is None:
            logger.debug("Reading from standard input")
            return InputHandle(_stdin_buffer(), StreamKind.STANDARD)
        try:
            stream = open(self.path, "rb")
        except OSError as exc:
            logger.debug("Cannot open %s for reading: %s", self.path, exc)
            raise
        logger.debug("Opened %s for reading", self.path)
        return InputHandle(stream, StreamKind.FILE, self.path)

    def __str__(self) -> str:
        return "<stdin>" if self.path is None else str(self.path)


@dataclass(frozen=True)
class OutputSink:
    """Where output goes: a file path (created or truncated on open), or stdout when path is None."""

    path: Optional[Path] = None

    @classmethod
    def from_arg(cls, value: PathArg, dash_is_stdio: bool = True) -> OutputSink:
        return cls(_resolve_arg(value, dash_is_stdio))

    @property
    def is_standard(self) -> bool:
        return self.path is None

    def open(self) -> OutputHandle:
        """Open for writing, truncating any existing file. OSError propagates; no fallback to stdout."""
        if self.path is None:
            logger.debug("Writing to standard output")
            return OutputHandle(_stdout_buffer(), StreamKind.STANDARD)
        try:
            stream = open(self.path, "wb")
        except OSError as exc:
            logger.debug("Cannot open %s for writing: %s", self.path, exc)
            raise
        logger.debug("Opened %s for writing", self.path)
        return OutputHandle(stream, StreamKind.FILE, self.path)

    def __str__(self) -> str:
        return "<stdout>" if self.path is None else str(self.path)


def open_input(path: PathArg = None, *, dash_is_stdio: bool = True) -> InputHandle:
    """
    Open path for reading, or return a handle on stdin when path is None.

    With dash_is_stdio (the default), "-" also selects stdin; otherwise it is a literal filename.
    """
    return InputSource.from_arg(path, dash_is_stdio=dash_is_stdio).open()


def open_output(path: PathArg = None, *, dash_is_stdio: bool = True) -> OutputHandle:
    """
    Open path for writing (create/truncate), or return a handle on stdout when path is None.

    With dash_is_stdio (the default), "-" also selects stdout; otherwise it is a literal filename.
    """
    return OutputSink.from_arg(path, dash_is_stdio=dash_is_stdio).open()


def copy_stream(src: InputHandle, dst: OutputHandle, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """Copy everything remaining in src to dst in chunks. Returns the number of bytes copied."""
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    total = 0
    while True:
        chunk = src.read(chunk_size)
        if not chunk:
            break
        dst.write(chunk)
        total += len(chunk)
    dst.flush()
    return total
