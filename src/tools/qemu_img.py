"""qemu-img backed image format conversion.

This module converts qcow/vdi/vmdk images into raw images and forwards
the percentage updates qemu-img prints when run with ``-p``.
"""

from __future__ import annotations

import re
import subprocess
import tempfile
from pathlib import Path
from typing import IO, Iterator, cast

from core.errors import ConversionFailedError
from tools.protocols import ProgressCallback
from tools.runner import require_tool

_PROGRESS_PATTERN = re.compile(r"\((\d+(?:\.\d+)?)/100%\)")


class QemuImgConverter:
    """Convert images with ``qemu-img convert``."""

    def __init__(self, binary: str) -> None:
        self._binary = binary

    def convert(
        self,
        source: Path,
        output: Path,
        output_format: str,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Write ``source`` to ``output`` in ``output_format``.

        Raises:
            MissingExternalToolError: If qemu-img is not installed.
            ConversionFailedError: If qemu-img exits non-zero.
        """
        executable = require_tool(self._binary)
        command = [executable, "convert", "-p", "-O", output_format, str(source), str(output)]
        with tempfile.TemporaryFile(mode="w+", encoding="utf-8") as stderr_file:
            try:
                process = subprocess.Popen(
                    command,
                    stdout=subprocess.PIPE,
                    stderr=stderr_file,
                    text=True,
                )
            except OSError as error:
                raise ConversionFailedError(
                    f"Failed to start image conversion of {source}: {error}."
                ) from error
            stdout = cast(IO[str], process.stdout)
            for percent in parse_progress_stream(stdout):
                if on_progress is not None:
                    on_progress(percent)
            stdout.close()
            return_code = process.wait()
            stderr_file.seek(0)
            stderr_text = stderr_file.read()
        if return_code != 0:
            detail = stderr_text.strip() or f"exit status {return_code}"
            raise ConversionFailedError(
                f"Failed to convert {source} to a {output_format} image: {detail}. "
                "Check that the image is readable and not corrupted."
            )


def parse_progress_stream(stream: IO[str]) -> Iterator[float]:
    """Yield progress percentages from a carriage-return separated stream."""
    buffer = ""
    while True:
        chunk = stream.read(64)
        if not chunk:
            break
        buffer += chunk
        *complete, buffer = re.split(r"[\r\n]", buffer)
        for segment in complete:
            yield from _percentages(segment)
    yield from _percentages(buffer)


def _percentages(segment: str) -> Iterator[float]:
    for match in _PROGRESS_PATTERN.finditer(segment):
        yield float(match.group(1))
