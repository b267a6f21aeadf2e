"""
Fixed-row-height tables.

Cells are single lines: over-long values are truncated, never wrapped, so
every row has the same height and can be placed with one ensure_space call.

Line item tables are grouped by category. Grouping is a partition of an
already sorted list into contiguous runs; a category that shows up again
after a different one is a caller error (CategoryOrderError), not something
the table silently regroups.
"""

from __future__ import annotations

import itertools
import logging
import math
from dataclasses import dataclass
from typing import Final, Iterable, List, Optional, Sequence, Tuple, Union

from reporting.layout import CONTENT_WIDTH, MARGIN, LayoutCursor, PageSurface
from reporting.schemas import LineItem
from reporting.text_flow import truncate
from utils.formatting import PLACEHOLDER, format_currency, format_number

logger = logging.getLogger(__name__)


class CategoryOrderError(ValueError):
    """Line items are not sorted so that each category is contiguous."""

    def __init__(self, category: str, position: int):
        self.category = category
        self.position = position
        super().__init__(
            f"Category '{category}' reappears at item {position}; "
            f"line items must be sorted by category"
        )


# =============================================================================
# Column and Cell Definitions
# =============================================================================


@dataclass(frozen=True)
class ColumnSpec:
    """One table column. x is the offset from the table's left edge."""

    label: str
    x: float
    width: float
    align: str = "left"
    max_chars: Optional[int] = None

    def anchor(self, left: float) -> float:
        """x coordinate text is drawn from for this column."""
        if self.align == "right":
            return left + self.x + self.width - 4
        return left + self.x + 3

    def fit(self, value: str) -> str:
        if self.max_chars is None:
            return value
        return truncate(value, self.max_chars)


@dataclass(frozen=True)
class Cell:
    """Cell text plus the text style token to draw it with."""

    text: str
    style: str = "table_cell"


CellValue = Union[str, Cell]


LINE_ITEM_COLUMNS: Final[Tuple[ColumnSpec, ...]] = (
    ColumnSpec("Code", 0, 72),
    ColumnSpec("Description", 72, 180, max_chars=42),
    ColumnSpec("Qty", 252, 36),
    ColumnSpec("Unit", 288, 32),
    ColumnSpec("Unit Price", 320, 65, align="right"),
    ColumnSpec("RCV", 385, 80, align="right"),
)

NO_LINE_ITEMS_MESSAGE: Final[str] = "No line items detected."


# =============================================================================
# Grouping
# =============================================================================


@dataclass(frozen=True)
class CategoryGroup:
    category: str
    items: Tuple[LineItem, ...]

    @property
    def subtotal(self) -> float:
        return math.fsum(item.total_price for item in self.items)


def group_by_category(items: Iterable[LineItem]) -> List[CategoryGroup]:
    """
    Partition sorted items into contiguous category runs.

    Raises:
        CategoryOrderError: a category appears in two separate runs
    """
    groups: List[CategoryGroup] = []
    seen = set()
    position = 0
    for category, run in itertools.groupby(items, key=lambda item: item.category):
        if category in seen:
            raise CategoryOrderError(category, position)
        seen.add(category)
        run_items = tuple(run)
        groups.append(CategoryGroup(category=category, items=run_items))
        position += len(run_items)
    return groups


@dataclass(frozen=True)
class TableSummary:
    """What a line item table rendered."""

    row_count: int
    categories: Tuple[str, ...]
    total: float


# =============================================================================
# Renderer
# =============================================================================


class TableRenderer:
    """
    Draws header, body and total rows at the cursor.

    When a row triggers a page break the most recent header row is drawn
    again at the top of the new page.
    """

    ROW_HEIGHT: Final[float] = 14
    HEADER_HEIGHT: Final[float] = 16
    BANNER_HEIGHT: Final[float] = 14
    TOTAL_HEIGHT: Final[float] = 20

    def __init__(
        self,
        surface: PageSurface,
        cursor: LayoutCursor,
        left: float = MARGIN,
        width: float = CONTENT_WIDTH,
    ):
        self.surface = surface
        self.cursor = cursor
        self.left = left
        self.width = width
        self._repeat_columns: Optional[Sequence[ColumnSpec]] = None
        self._repeat_fill = "accent"

    # -------------------------------------------------------------------------
    # Rows
    # -------------------------------------------------------------------------

    def header(self, columns: Sequence[ColumnSpec], fill: str = "accent", repeat: bool = True) -> None:
        self.cursor.ensure_space(self.HEADER_HEIGHT + self.ROW_HEIGHT)
        self._draw_header(columns, fill)
        self._repeat_columns = columns if repeat else None
        self._repeat_fill = fill

    def _draw_header(self, columns: Sequence[ColumnSpec], fill: str) -> None:
        y = self.cursor.y
        self.surface.rect(self.left, y - 11, self.width, self.HEADER_HEIGHT, fill=fill)
        for column in columns:
            self.surface.text(column.anchor(self.left), y, column.label, "table_header", align=column.align)
        self.cursor.advance(self.HEADER_HEIGHT)

    def _ensure_row_space(self, height: float) -> None:
        if self.cursor.ensure_space(height) and self._repeat_columns is not None:
            self._draw_header(self._repeat_columns, self._repeat_fill)

    def row(
        self,
        columns: Sequence[ColumnSpec],
        cells: Sequence[CellValue],
        shaded: bool = False,
        highlight: Optional[str] = None,
        divider: bool = True,
    ) -> None:
        """
        One body row. highlight overrides the shading fill; cells beyond
        the column count are ignored.
        """
        self._ensure_row_space(self.ROW_HEIGHT)
        y = self.cursor.y

        fill = highlight or ("bg_light" if shaded else None)
        if fill is not None:
            self.surface.rect(self.left, y - 9, self.width, self.ROW_HEIGHT, fill=fill)

        for column, value in zip(columns, cells):
            cell = value if isinstance(value, Cell) else Cell(value)
            text = column.fit(cell.text) if cell.text else PLACEHOLDER
            self.surface.text(column.anchor(self.left), y, text, cell.style, align=column.align)

        if divider:
            self.surface.line(self.left, y + 5, self.left + self.width, y + 5, width=0.3)
        self.cursor.advance(self.ROW_HEIGHT)

    def banner(self, label: str, value: str = "", fill: str = "bg_accent", style: str = "category") -> None:
        """A full-width band row, e.g. a category heading with its subtotal."""
        self._ensure_row_space(self.BANNER_HEIGHT + self.ROW_HEIGHT)
        y = self.cursor.y
        self.surface.rect(self.left, y - 9, self.width, self.BANNER_HEIGHT, fill=fill)
        self.surface.text(self.left + 6, y, label, style)
        if value:
            self.surface.text(self.left + self.width - 4, y, value, style, align="right")
        self.cursor.advance(self.BANNER_HEIGHT)

    def total_row(self, label: str, value: str, fill: str = "accent") -> None:
        self.cursor.ensure_space(self.TOTAL_HEIGHT + 4)
        self.cursor.advance(4)
        y = self.cursor.y
        self.surface.rect(self.left, y - 12, self.width, self.TOTAL_HEIGHT, fill=fill)
        self.surface.text(self.left + 6, y, label, "total")
        self.surface.text(self.left + self.width - 4, y, value, "total", align="right")
        self.cursor.advance(self.TOTAL_HEIGHT + 8)

    def placeholder(self, message: str) -> None:
        self.cursor.ensure_space(self.ROW_HEIGHT + 6)
        self.surface.text(self.left, self.cursor.y, message, "placeholder")
        self.cursor.advance(self.surface.theme.text("placeholder").line_height)

    # -------------------------------------------------------------------------
    # Line Items
    # -------------------------------------------------------------------------

    def line_items(
        self,
        items: Sequence[LineItem],
        columns: Sequence[ColumnSpec] = LINE_ITEM_COLUMNS,
        total_label: str = "SUPPLEMENT TOTAL",
        empty_message: str = NO_LINE_ITEMS_MESSAGE,
    ) -> TableSummary:
        """
        Category-grouped line item table with subtotal banners and a total row.

        The total is the sum of total_price over exactly the items passed in.
        An empty list draws a single placeholder line and no table.
        """
        if not items:
            self.placeholder(empty_message)
            return TableSummary(row_count=0, categories=(), total=0.0)

        groups = group_by_category(items)
        self.header(columns)

        row_count = 0
        for group in groups:
            self.banner(group.category.upper() or "UNCATEGORIZED", format_currency(group.subtotal))
            for index, item in enumerate(group.items):
                self.row(columns, self._line_item_cells(item), shaded=index % 2 == 1)
                row_count += 1

        self._repeat_columns = None
        total = math.fsum(item.total_price for item in items)
        self.total_row(total_label, format_currency(total))

        logger.debug("Rendered %d line item rows in %d categories", row_count, len(groups))
        return TableSummary(
            row_count=row_count,
            categories=tuple(group.category for group in groups),
            total=total,
        )

    @staticmethod
    def _line_item_cells(item: LineItem) -> List[Cell]:
        return [
            Cell(item.code, "table_cell_bold"),
            Cell(item.description),
            Cell(format_number(item.quantity)),
            Cell(item.unit),
            Cell(format_currency(item.unit_price)),
            Cell(format_currency(item.total_price), "table_cell_bold"),
        ]
