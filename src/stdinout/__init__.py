"""Open a named file when a path is given, else fall back to stdin/stdout."""

from stdinout.streams import (
    InputHandle,
    InputSource,
    OutputHandle,
    OutputSink,
    StreamHandle,
    StreamKind,
    copy_stream,
    open_input,
    open_output,
)

__version__ = "0.1.0"

__all__ = [
    "InputHandle",
    "InputSource",
    "OutputHandle",
    "OutputSink",
    "StreamHandle",
    "StreamKind",
    "__version__",
    "copy_stream",
    "open_input",
    "open_output",
]
