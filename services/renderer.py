"""PDF rendering of normalized readings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from fpdf import FPDF
from fpdf.errors import FPDFException

from models.records import NormalizedReading
from services.errors import RenderError

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Glucose Values"
DEFAULT_COLUMNS = ("Date", "Time", "Glucose value")
FONT_FAMILY = "helvetica"


@dataclass(frozen=True)
class TableLayout:
    """Cell geometry in inches."""

    indent: float = 1.35
    column_width: float = 1.7
    row_height: float = 0.3


class ReadingsDocument(FPDF):
    """Letter-sized document that repeats the title and column header on every page."""

    def __init__(
        self,
        title: str = DEFAULT_TITLE,
        columns: Sequence[str] = DEFAULT_COLUMNS,
        layout: TableLayout = TableLayout(),
    ) -> None:
        super().__init__(orientation="P", unit="in", format="letter")
        self.report_title = title
        self.columns = tuple(columns)
        self.layout = layout
        self.alias_nb_pages()

    def header(self) -> None:
        self.set_y(0.2)
        self.set_font(FONT_FAMILY, "B", 15)
        self.cell(0, 0.4, self.report_title, align="C")
        self.ln(0.5)
        self.table_row(self.columns)
        self.set_font(FONT_FAMILY, "", 12)

    def footer(self) -> None:
        self.set_y(-0.5)
        self.set_font(FONT_FAMILY, "I", 8)
        self.cell(0, 0.4, f"Page {self.page_no()} / {self.str_alias_nb_pages}", align="C")

    def table_row(self, values: Iterable[str]) -> None:
        self.cell(self.layout.indent, 0, "")
        for value in values:
            self.cell(
                self.layout.column_width,
                self.layout.row_height,
                value,
                border=1,
                align="C",
            )
        self.ln(self.layout.row_height)


class ReportRenderer:
    """Builds a fresh ``ReadingsDocument`` for every call."""

    def __init__(
        self,
        title: str = DEFAULT_TITLE,
        columns: Sequence[str] = DEFAULT_COLUMNS,
        layout: TableLayout = TableLayout(),
        compress: bool = True,
    ) -> None:
        self.title = title
        self.columns = tuple(columns)
        self.layout = layout
        self.compress = compress

    def build(self, readings: Iterable[NormalizedReading]) -> ReadingsDocument:
        document = ReadingsDocument(title=self.title, columns=self.columns, layout=self.layout)
        document.set_compression(self.compress)
        document.add_page()
        document.set_font(FONT_FAMILY, "", 12)
        for reading in readings:
            document.table_row(reading.as_row())
        return document

    def render(self, readings: Iterable[NormalizedReading]) -> bytes:
        try:
            document = self.build(readings)
            output = bytes(document.output())
        except FPDFException as exc:
            raise RenderError(str(exc)) from exc
        logger.info("Rendered report", extra={"page_count": document.page_no()})
        return output


def render(readings: Iterable[NormalizedReading], title: str = DEFAULT_TITLE) -> bytes:
    return ReportRenderer(title=title).render(readings)
