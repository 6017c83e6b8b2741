"""PDF rendering of styled pivot tables using ReportLab."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from reportlab.lib.colors import HexColor, black
from reportlab.lib.pagesizes import LETTER, landscape, portrait
from reportlab.lib.units import inch
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from .styled_table import BODY, HEADER, Border, CellStyle, StyledTable
from .themes import get_bold_font

logger = logging.getLogger(__name__)

ORIENTATIONS = ("portrait", "landscape")
DEFAULT_MARGIN = 0.5 * inch

DEFAULT_FONT = "Helvetica"
LINE_HEIGHT = 1.2  # Text line height as a multiple of font size
TITLE_GAP = 8.0
ELLIPSIS = "..."


@dataclass
class PageLayout:
    """Letter-based page with uniform margins, in points."""
    pagesize: Tuple[float, float] = portrait(LETTER)
    margin: float = DEFAULT_MARGIN

    @classmethod
    def for_orientation(cls, orientation: str) -> "PageLayout":
        if orientation not in ORIENTATIONS:
            raise ValueError(f"Unknown orientation: {orientation!r}")
        size = landscape(LETTER) if orientation == "landscape" else portrait(LETTER)
        return cls(pagesize=size)

    @classmethod
    def fitting(cls, table_width: float) -> "PageLayout":
        """Portrait when the table fits between the margins, else landscape."""
        layout = cls.for_orientation("portrait")
        if table_width <= layout.content_width:
            return layout
        return cls.for_orientation("landscape")

    @property
    def orientation(self) -> str:
        width, height = self.pagesize
        return "landscape" if width > height else "portrait"

    @property
    def content_width(self) -> float:
        return self.pagesize[0] - 2 * self.margin

    @property
    def content_height(self) -> float:
        return self.pagesize[1] - 2 * self.margin

    @property
    def left(self) -> float:
        return self.margin

    @property
    def top(self) -> float:
        """Top of the content area; PDF y grows upward."""
        return self.pagesize[1] - self.margin


@dataclass
class RenderedRegion:
    """Metadata for a drawn cell or merged block of cells."""
    text: str
    part: str
    page_index: int
    first_row: int
    last_row: int
    first_col: int
    last_col: int
    bbox: Tuple[float, float, float, float]  # x0, y0, x1, y1


@dataclass
class RenderedPivot:
    """Metadata for a rendered document."""
    pdf_path: Path
    page_count: int
    orientation: str
    column_width: float  # Points, after any shrinking to fit the page
    regions: List[RenderedRegion]


@dataclass
class _Region:
    part: str
    first_row: int
    last_row: int
    first_col: int
    last_col: int
    text: str
    align: str
    style: CellStyle       # Top-left cell; background, text and top/left borders
    end_style: CellStyle   # Bottom-right cell; bottom/right borders


def truncate_text(text: str, max_width: float, font_name: str, font_size: float) -> str:
    """Longest prefix of text that fits in max_width, with an ellipsis when cut."""
    if not text or stringWidth(text, font_name, font_size) <= max_width:
        return text

    room = max_width - stringWidth(ELLIPSIS, font_name, font_size)
    if room <= 0:
        return ELLIPSIS[0]

    # Binary search on the prefix length
    lo, hi = 0, len(text)
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if stringWidth(text[:mid], font_name, font_size) <= room:
            lo = mid
        else:
            hi = mid - 1
    return text[:lo].rstrip() + ELLIPSIS

def row_height(styles: List[CellStyle]) -> float:
    """Height of a row: tallest font plus padding above and below."""
    heights = [
        (style.font_size or 0) * LINE_HEIGHT + 2 * (style.padding or 0)
        for style in styles
    ]
    return max(heights) if heights else 0.0


def _font(style: CellStyle) -> str:
    font = style.font_name or DEFAULT_FONT
    return get_bold_font(font) if style.bold else font


class PDFRenderer:
    """Draws a StyledTable onto PDF pages and captures region metadata."""

    def __init__(self, layout: Optional[PageLayout] = None):
        self.layout = layout

    def choose_layout(self, table: StyledTable) -> PageLayout:
        """Use the configured layout, else portrait unless the table is too wide."""
        if self.layout is not None:
            return self.layout
        return PageLayout.fitting(table.n_cols * table.column_width * inch)

    def fit_column_width(self, table: StyledTable, layout: PageLayout) -> float:
        """Column width in points, shrunk so every column fits between the margins."""
        width = table.column_width * inch
        if table.n_cols and table.n_cols * width > layout.content_width:
            fitted = layout.content_width / table.n_cols
            logger.warning(
                "%d columns of %.2fin exceed the %s page width; shrinking columns to %.2fin",
                table.n_cols, table.column_width, layout.orientation, fitted / inch,
            )
            return fitted
        return width

    def render(
        self,
        table: StyledTable,
        pdf_path: Path,
        title: Optional[str] = None,
    ) -> RenderedPivot:
        """
        Render a styled table to a PDF file.

        Body rows flow onto new pages as needed; header rows repeat on every
        page and merged row labels are split at page breaks.

        Returns:
            RenderedPivot with page count and the drawn regions
        """
        layout = self.choose_layout(table)
        col_width = self.fit_column_width(table, layout)
        header_styles = table.resolve(HEADER)
        body_styles = table.resolve(BODY)
        header_heights = [row_height(styles) for styles in header_styles]
        body_heights = [row_height(styles) for styles in body_styles]
        title_size = max((s.font_size or 0 for row in header_styles for s in row), default=12)

        pages = self._paginate(
            layout,
            header_heights,
            body_heights,
            title_height=self._title_height(title_size) if title else 0.0,
        )

        c = canvas.Canvas(str(pdf_path), pagesize=layout.pagesize)
        regions: List[RenderedRegion] = []

        for page_index, (first, last) in enumerate(pages):
            if page_index > 0:
                c.showPage()

            y = layout.top
            if title and page_index == 0:
                y = self._draw_title(c, layout, title, title_size, y)

            # Row positions on this page
            tops: Dict[Tuple[str, int], float] = {}
            bottoms: Dict[Tuple[str, int], float] = {}
            for i, height in enumerate(header_heights):
                tops[(HEADER, i)] = y
                y -= height
                bottoms[(HEADER, i)] = y
            for i in range(first, last + 1):
                tops[(BODY, i)] = y
                y -= body_heights[i]
                bottoms[(BODY, i)] = y

            page_regions = self._header_regions(table, header_styles)
            page_regions += self._body_regions(table, body_styles, first, last)

            boxes = []
            for region in page_regions:
                bbox = self._region_bbox(layout, col_width, region, tops, bottoms)
                boxes.append(bbox)
                self._draw_region(c, region, bbox)
                regions.append(RenderedRegion(
                    text=region.text,
                    part=region.part,
                    page_index=page_index,
                    first_row=region.first_row,
                    last_row=region.last_row,
                    first_col=region.first_col,
                    last_col=region.last_col,
                    bbox=bbox,
                ))

            # Borders after all fills so backgrounds never cover them
            for region, bbox in zip(page_regions, boxes):
                self._draw_borders(c, region, bbox)

        c.save()
        logger.info("Rendered %s (%d pages, %s)", pdf_path, len(pages), layout.orientation)

        return RenderedPivot(
            pdf_path=Path(pdf_path),
            page_count=len(pages),
            orientation=layout.orientation,
            column_width=col_width,
            regions=regions,
        )

    def _title_height(self, size: float) -> float:
        return (size + 2) * LINE_HEIGHT + TITLE_GAP

    def _paginate(
        self,
        layout: PageLayout,
        header_heights: List[float],
        body_heights: List[float],
        title_height: float = 0.0,
    ) -> List[Tuple[int, int]]:
        """Split body rows into (first, last) ranges, one per page."""
        header_total = sum(header_heights)
        pages = []
        first = 0
        used = title_height + header_total
        for i, height in enumerate(body_heights):
            # Every page takes at least one body row
            if i > first and used + height > layout.content_height:
                pages.append((first, i - 1))
                first = i
                used = header_total
            used += height
        pages.append((first, len(body_heights) - 1))
        return pages

    def _draw_title(
        self,
        c: canvas.Canvas,
        layout: PageLayout,
        title: str,
        size: float,
        y: float,
    ) -> float:
        """Draw the table title and return the y position below it."""
        title_size = size + 2
        c.setFont(get_bold_font(DEFAULT_FONT), title_size)
        c.setFillColor(black)
        c.drawString(layout.left, y - title_size, title)
        return y - self._title_height(size)

    def _header_regions(self, table: StyledTable, styles: List[List[CellStyle]]) -> List[_Region]:
        regions = []
        for i in range(table.n_header_rows):
            for first_col, last_col, cell in table.header_spans(i):
                regions.append(_Region(
                    part=HEADER,
                    first_row=i,
                    last_row=i,
                    first_col=first_col,
                    last_col=last_col,
                    text=cell.label,
                    align=cell.align,
                    style=styles[i][first_col],
                    end_style=styles[i][last_col],
                ))
        return regions

    def _body_regions(
        self,
        table: StyledTable,
        styles: List[List[CellStyle]],
        first: int,
        last: int,
    ) -> List[_Region]:
        regions = []
        covered = set()
        for i in range(first, last + 1):
            for j in range(table.n_cols):
                if (i, j) in covered:
                    continue
                end_row = i
                merge = table.merge_at(i, j)
                if merge is not None:
                    end_row = min(merge.last_row, last)
                    covered.update((r, j) for r in range(i, end_row + 1))
                regions.append(_Region(
                    part=BODY,
                    first_row=i,
                    last_row=end_row,
                    first_col=j,
                    last_col=j,
                    text=table.body[i][j],
                    align="left",
                    style=styles[i][j],
                    end_style=styles[end_row][j],
                ))
        return regions

    def _region_bbox(
        self,
        layout: PageLayout,
        col_width: float,
        region: _Region,
        tops: Dict[Tuple[str, int], float],
        bottoms: Dict[Tuple[str, int], float],
    ) -> Tuple[float, float, float, float]:
        x0 = layout.left + region.first_col * col_width
        x1 = layout.left + (region.last_col + 1) * col_width
        y_top = tops[(region.part, region.first_row)]
        y_bottom = bottoms[(region.part, region.last_row)]
        return (x0, y_bottom, x1, y_top)

    def _draw_region(
        self,
        c: canvas.Canvas,
        region: _Region,
        bbox: Tuple[float, float, float, float],
    ):
        """Draw background and text of a region."""
        x0, y_bottom, x1, y_top = bbox
        style = region.style

        if style.background:
            c.setFillColor(HexColor(style.background))
            c.rect(x0, y_bottom, x1 - x0, y_top - y_bottom, fill=True, stroke=False)

        if not region.text:
            return

        font_name = _font(style)
        font_size = style.font_size or 10
        padding = style.padding or 0
        c.setFont(font_name, font_size)
        c.setFillColor(HexColor(style.foreground) if style.foreground else black)

        display_text = truncate_text(region.text, x1 - x0 - 2 * padding, font_name, font_size)
        text_y = (y_top + y_bottom) / 2 - font_size * 0.35
        if region.align == "right":
            c.drawRightString(x1 - padding, text_y, display_text)
        elif region.align == "center":
            c.drawCentredString((x0 + x1) / 2, text_y, display_text)
        else:
            c.drawString(x0 + padding, text_y, display_text)

    def _draw_borders(
        self,
        c: canvas.Canvas,
        region: _Region,
        bbox: Tuple[float, float, float, float],
    ):
        x0, y_bottom, x1, y_top = bbox

        def draw_line(border: Optional[Border], x_a, y_a, x_b, y_b):
            if border is None or border.width <= 0:
                return
            c.setStrokeColor(HexColor(border.color))
            c.setLineWidth(border.width)
            c.line(x_a, y_a, x_b, y_b)

        draw_line(region.end_style.border_bottom, x0, y_bottom, x1, y_bottom)
        draw_line(region.end_style.border_right, x1, y_top, x1, y_bottom)
        draw_line(region.style.border_left, x0, y_top, x0, y_bottom)
        draw_line(region.style.border_top, x0, y_top, x1, y_top)
