"""Import draft task values from CSV."""

import csv
import io
import json
import logging
from collections.abc import Mapping, Sequence

from ..models.placeholder import Placeholder
from ..models.task import (
    DEFAULT_FILE_TYPE,
    CarouselContent,
    CarouselSlide,
    DraftTask,
    SlotValue,
    TaskValue,
)
from ..models.template import ContainerNode, DynamicNode, TemplateNode
from .draft_store import DraftTaskStore

logger = logging.getLogger(__name__)


class CsvImportError(Exception):
    """CSV source could not be read."""
    pass


class ColumnMismatchError(CsvImportError):
    """CSV header width differs from the template's placeholder count."""
    def __init__(self, headers: Sequence[str], placeholder_names: Sequence[str]):
        self.headers = list(headers)
        self.placeholder_names = list(placeholder_names)
        self.header_count = len(self.headers)
        self.placeholder_count = len(self.placeholder_names)
        super().__init__(
            f"CSV has {self.header_count} columns {self.headers} but the template has "
            f"{self.placeholder_count} placeholders {self.placeholder_names}"
        )


def read_csv(source: str | bytes) -> list[list[str]]:
    """Decode UTF-8 CSV text into rows of cells."""
    if isinstance(source, bytes):
        try:
            source = source.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise CsvImportError(f"CSV is not valid UTF-8: {e}") from e
    elif source.startswith("\ufeff"):
        source = source[1:]

    try:
        return [row for row in csv.reader(io.StringIO(source, newline=""))]
    except csv.Error as e:
        raise CsvImportError(f"Failed to parse CSV: {e}") from e


def carousel_defaults(nodes: Sequence[TemplateNode]) -> dict[str, CarouselContent]:
    """Blanked carousel structure for every carousel slot in the template."""
    found: dict[str, CarouselContent] = {}

    def visit(node: TemplateNode) -> None:
        if isinstance(node, DynamicNode) and node.type == "dynamicCarousel" and node.name:
            try:
                found[node.name] = CarouselContent.from_dict(node.content).blanked()
            except (ValueError, AttributeError):
                found[node.name] = CarouselContent()
        elif isinstance(node, ContainerNode):
            for child in node.content:
                visit(child)

    for node in nodes:
        visit(node)
    return found


def _is_blank(row: Sequence[str]) -> bool:
    return not any(cell.strip() for cell in row)


def _carousel_cell(cell: str, fallback: CarouselContent) -> CarouselContent:
    try:
        data = json.loads(cell)
        if not isinstance(data, dict):
            raise ValueError("carousel cell must be a JSON object")
        content = CarouselContent.from_dict(data)
    except (ValueError, AttributeError):
        return fallback
    # Normalize slides so every one carries text and source
    return CarouselContent(
        slides=tuple(
            CarouselSlide(type=s.type, src=s.src or "", inner_text=s.inner_text or "")
            for s in content.slides
        ),
        keyboard_nav=content.keyboard_nav,
        auto_slide=content.auto_slide,
        slide_interval=content.slide_interval,
    )


def import_csv(
    rows: Sequence[Sequence[str]],
    placeholders: Sequence[Placeholder],
    carousels: Mapping[str, CarouselContent] | None = None,
) -> list[DraftTask]:
    """
    Turn CSV rows into draft tasks.

    The first row is a header and is only used to check the column count
    against the placeholders; every following non-blank row becomes one
    draft task whose cell i fills placeholder i. Header-less files lose
    their first data row.

    Raises:
        ColumnMismatchError: header width != number of placeholders.
    """
    headers = list(rows[0]) if rows else []
    if len(headers) != len(placeholders):
        raise ColumnMismatchError(headers, [p.name for p in placeholders])

    carousels = carousels or {}
    tasks: list[DraftTask] = []
    skipped = 0

    for row in rows[1:]:
        if _is_blank(row):
            skipped += 1
            continue

        values: list[SlotValue | None] = []
        for i, placeholder in enumerate(placeholders):
            cell = row[i] if i < len(row) else ""
            if placeholder.type == "carousel":
                fallback = carousels.get(placeholder.name, CarouselContent())
                values.append(_carousel_cell(cell, fallback))
            else:
                values.append(TaskValue(content=cell, file_type=DEFAULT_FILE_TYPE))
        tasks.append(DraftTask(id=len(tasks) + 1, values=values))

    logger.info("CSV import: %d tasks, %d blank rows skipped", len(tasks), skipped)
    return tasks


class CsvImporter:
    """Replace a store's drafts with the contents of a CSV file, all or nothing."""

    def __init__(
        self,
        store: DraftTaskStore,
        placeholders: Sequence[Placeholder],
        nodes: Sequence[TemplateNode] = (),
    ):
        self.store = store
        self.placeholders = list(placeholders)
        self.carousels = carousel_defaults(nodes)

    def import_source(self, source: str | bytes) -> list[DraftTask]:
        """Parse and import CSV text/bytes. The store is untouched on any error."""
        rows = read_csv(source)
        return self.import_rows(rows)

    def import_rows(self, rows: Sequence[Sequence[str]]) -> list[DraftTask]:
        parsed = import_csv(rows, self.placeholders, self.carousels)
        return self.store.replace_all([task.values for task in parsed])
