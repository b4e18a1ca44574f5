"""
Printer sinks: the destination for printer primitives.

PrinterSink is the capability the renderers draw on. EscposSink implements it
with python-escpos: every primitive is buffered in a Dummy printer and only
execute() opens a socket to the device and writes the whole batch at once, so
a failure while rendering never leaves partial output on paper.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import List, Optional, Protocol

from escpos.constants import QR_ECLEVEL_H, QR_ECLEVEL_L, QR_ECLEVEL_M, QR_ECLEVEL_Q
from escpos.printer import Dummy, Network
from PIL import Image

from print_dispatch.core.errors import TransmitError

logger = logging.getLogger(__name__)

# 80mm paper, font A
PAPER_COLUMNS = 48
PAPER_WIDTH_DOTS = 576

# ESC B n t: sound the buzzer once for 3 x 50ms
BEEP = b"\x1bB\x01\x03"

_QR_LEVELS = {"L": QR_ECLEVEL_L, "M": QR_ECLEVEL_M, "Q": QR_ECLEVEL_Q, "H": QR_ECLEVEL_H}


@dataclass(frozen=True)
class Cell:
    """One column of a table row. width is in characters."""

    text: str
    width: int
    align: str = "left"
    bold: bool = False


class PrinterSink(Protocol):
    def align_left(self) -> None: ...

    def align_center(self) -> None: ...

    def align_right(self) -> None: ...

    def bold(self, on: bool = True) -> None: ...

    def println(self, text: str = "") -> None: ...

    def new_line(self) -> None: ...

    def draw_line(self, char: str = "-") -> None: ...

    def table_row(self, cells: Sequence[Cell]) -> None: ...

    def left_right(self, left: str, right: str) -> None: ...

    def print_image(self, path: str) -> None: ...

    def print_qr(self, data: str, size: int = 6, correction: str = "M") -> None: ...

    def cut(self) -> None: ...

    def beep(self) -> None: ...

    def execute(self) -> None: ...


def pad_cell(text: str, width: int, align: str = "left") -> str:
    """
    Fit text into exactly width characters, truncating when too long.
    """
    text = text[:width]
    if align == "right":
        return text.rjust(width)
    if align == "center":
        return text.center(width)
    return text.ljust(width)


def left_right_line(left: str, right: str, width: int = PAPER_COLUMNS) -> str:
    """
    Place left and right on one line of width characters, with at least one
    space between them; the left side is truncated first.
    """
    right = right[:width]
    room = max(width - len(right) - 1, 0)
    left = left[:room]
    return left + " " * (width - len(left) - len(right)) + right


class EscposSink:
    """
    Buffered ESC/POS sink for a network printer at host:port.

    Creating a sink does not touch the network; execute() does.
    """

    def __init__(
        self,
        host: str,
        port: int = 9100,
        *,
        timeout: float = 15.0,
        columns: int = PAPER_COLUMNS,
        profile: Optional[str] = None,
    ) -> None:
        self.host = host
        self.port = int(port)
        self.timeout = timeout
        self.columns = columns
        self.profile = profile
        self._buffer = Dummy(profile=profile) if profile else Dummy()
        self._align = "left"
        self._bold = False

    def _apply_style(self, bold: Optional[bool] = None) -> None:
        # Always send both attributes; older python-escpos resets omitted ones.
        self._buffer.set(align=self._align, bold=self._bold if bold is None else bold)

    def align_left(self) -> None:
        self._align = "left"
        self._apply_style()

    def align_center(self) -> None:
        self._align = "center"
        self._apply_style()

    def align_right(self) -> None:
        self._align = "right"
        self._apply_style()

    def bold(self, on: bool = True) -> None:
        self._bold = bool(on)
        self._apply_style()

    def println(self, text: str = "") -> None:
        self._buffer.text(f"{text}\n")

    def new_line(self) -> None:
        self._buffer.text("\n")

    def draw_line(self, char: str = "-") -> None:
        self._buffer.text((char or "-")[0] * self.columns + "\n")

    def table_row(self, cells: Sequence[Cell]) -> None:
        for cell in cells:
            if cell.bold != self._bold:
                self._apply_style(bold=cell.bold)
                self._buffer.text(pad_cell(cell.text, cell.width, cell.align))
                self._apply_style()
            else:
                self._buffer.text(pad_cell(cell.text, cell.width, cell.align))
        self._buffer.text("\n")

    def left_right(self, left: str, right: str) -> None:
        self._buffer.text(left_right_line(left, right, self.columns) + "\n")

    def print_image(self, path: str) -> None:
        with Image.open(path) as src:
            img = src.convert("L")
        if img.width > PAPER_WIDTH_DOTS:
            height = max(1, round(img.height * PAPER_WIDTH_DOTS / img.width))
            img = img.resize((PAPER_WIDTH_DOTS, height))
        self._buffer.image(img)

    def print_qr(self, data: str, size: int = 6, correction: str = "M") -> None:
        ec = _QR_LEVELS.get(correction.upper(), QR_ECLEVEL_M)
        self._buffer.qr(data, ec=ec, size=size, native=True)

    def cut(self) -> None:
        self._buffer.cut()

    def beep(self) -> None:
        self._buffer._raw(BEEP)

    @property
    def output(self) -> bytes:
        return self._buffer.output

    def execute(self) -> None:
        """
        Send the buffered command stream to the device in one write.
        Raises TransmitError on any connection or socket failure.
        """
        data = self.output
        logger.info("Sending %d bytes to %s:%d", len(data), self.host, self.port)
        device = None
        try:
            device = Network(self.host, port=self.port, timeout=self.timeout)
            device._raw(data)
        except Exception as e:
            raise TransmitError(f"Transmit to {self.host}:{self.port} failed: {e}") from e
        finally:
            if device is not None:
                try:
                    device.close()
                except Exception as e:
                    logger.debug("Closing printer connection failed: %s", e)


__all__: List[str] = [
    "BEEP",
    "Cell",
    "EscposSink",
    "PAPER_COLUMNS",
    "PAPER_WIDTH_DOTS",
    "PrinterSink",
    "left_right_line",
    "pad_cell",
]
