"""Excel (.xlsx) workbook tools backed by openpyxl."""

import csv
import logging
from contextlib import contextmanager
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Dict, Iterator, List
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from util.envelope import error_response, success_response

from .input_model import (
    CreateWorkbookInput,
    ExportCsvInput,
    ImportCsvInput,
    MergeCellsInput,
    ReadCellInput,
    ReadRowInput,
    RenameWorksheetInput,
    WorkbookInput,
    WorksheetInput,
    WriteCellInput,
    WriteRowInput,
)

logger = logging.getLogger(__name__)


class WorkbookError(Exception):
    """Raised when a workbook or worksheet cannot be used as requested."""


WORKBOOK_ERRORS = (WorkbookError, OSError, ValueError, BadZipFile, InvalidFileException)


@contextmanager
def open_workbook(file_path: str, save: bool = False) -> Iterator[Workbook]:
    """Load a workbook, saving it back on a clean exit when save is set."""
    path = Path(file_path)
    if not path.exists():
        raise WorkbookError(f"File does not exist: {file_path}")

    workbook = load_workbook(path)
    try:
        yield workbook
        if save:
            workbook.save(path)
    finally:
        workbook.close()


def get_sheet(workbook: Workbook, sheet_name: str) -> Worksheet:
    if sheet_name not in workbook.sheetnames:
        raise WorkbookError(f"Worksheet '{sheet_name}' does not exist")
    return workbook[sheet_name]


def cell_text(value: Any) -> str:
    """Render a cell value the way every read tool reports it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def row_values(sheet: Worksheet, row_index: int) -> List[str]:
    """Rendered values of a 0-based row, without trailing empty cells."""
    row_number = row_index + 1
    if row_number > sheet.max_row:
        return []

    values = list(
        next(sheet.iter_rows(min_row=row_number, max_row=row_number, values_only=True))
    )
    while values and values[-1] is None:
        values.pop()
    return [cell_text(v) for v in values]


def _failure(e: Exception, **context) -> Dict:
    logger.warning("Excel operation failed: %s", e)
    return error_response(str(e), **context)


def create_excel_file(params: CreateWorkbookInput) -> Dict:
    """Create a new workbook with a single worksheet."""
    file_path = (
        params.file_name
        if params.file_name.endswith(".xlsx")
        else f"{params.file_name}.xlsx"
    )
    try:
        workbook = Workbook()
        workbook.active.title = params.sheet_name
        workbook.save(file_path)
    except WORKBOOK_ERRORS as e:
        return _failure(e, file_name=file_path)

    return success_response(
        message="Excel file created successfully",
        file_name=file_path,
        sheet_name=params.sheet_name,
    )


def add_worksheet(params: WorksheetInput) -> Dict:
    try:
        with open_workbook(params.file_path, save=True) as workbook:
            if params.sheet_name in workbook.sheetnames:
                raise WorkbookError(f"Worksheet '{params.sheet_name}' already exists")
            workbook.create_sheet(params.sheet_name)
    except WORKBOOK_ERRORS as e:
        return _failure(e, file_path=params.file_path)

    return success_response(
        message="Worksheet added successfully",
        file_path=params.file_path,
        sheet_name=params.sheet_name,
    )


def delete_worksheet(params: WorksheetInput) -> Dict:
    """Delete a worksheet; the last remaining worksheet can never be deleted."""
    try:
        with open_workbook(params.file_path, save=True) as workbook:
            sheet = get_sheet(workbook, params.sheet_name)
            if len(workbook.sheetnames) <= 1:
                raise WorkbookError(
                    "Cannot delete the only worksheet, Excel file must have at least one worksheet"
                )
            workbook.remove(sheet)
    except WORKBOOK_ERRORS as e:
        return _failure(e, file_path=params.file_path)

    return success_response(
        message="Worksheet deleted successfully",
        file_path=params.file_path,
        sheet_name=params.sheet_name,
    )


def rename_worksheet(params: RenameWorksheetInput) -> Dict:
    try:
        with open_workbook(params.file_path, save=True) as workbook:
            sheet = get_sheet(workbook, params.current_name)
            if params.new_name in workbook.sheetnames:
                raise WorkbookError(
                    f"Worksheet name '{params.new_name}' is already in use"
                )
            sheet.title = params.new_name
    except WORKBOOK_ERRORS as e:
        return _failure(e, file_path=params.file_path)

    return success_response(
        message="Worksheet renamed successfully",
        file_path=params.file_path,
        old_name=params.current_name,
        new_name=params.new_name,
    )


def write_cell_data(params: WriteCellInput) -> Dict:
    try:
        with open_workbook(params.file_path, save=True) as workbook:
            sheet = get_sheet(workbook, params.sheet_name)
            sheet.cell(
                row=params.row_index + 1, column=params.col_index + 1, value=params.data
            )
    except WORKBOOK_ERRORS as e:
        return _failure(e, file_path=params.file_path, sheet_name=params.sheet_name)

    return success_response(
        message="Cell data written successfully",
        file_path=params.file_path,
        sheet_name=params.sheet_name,
        cell=f"({params.row_index},{params.col_index})",
        value=params.data,
    )


def read_cell_data(params: ReadCellInput) -> Dict:
    """Read one cell; a row with no data reports exists=False and an empty value."""
    try:
        with open_workbook(params.file_path) as workbook:
            sheet = get_sheet(workbook, params.sheet_name)
            values = row_values(sheet, params.row_index)
    except WORKBOOK_ERRORS as e:
        return _failure(e, file_path=params.file_path, sheet_name=params.sheet_name)

    value = values[params.col_index] if params.col_index < len(values) else ""
    return success_response(
        value=value,
        file_path=params.file_path,
        sheet_name=params.sheet_name,
        cell=f"({params.row_index},{params.col_index})",
        exists=bool(values),
    )


def write_row_data(params: WriteRowInput) -> Dict:
    values = [v.strip() for v in params.data.split(",")]
    try:
        with open_workbook(params.file_path, save=True) as workbook:
            sheet = get_sheet(workbook, params.sheet_name)
            for col_index, value in enumerate(values):
                sheet.cell(row=params.row_index + 1, column=col_index + 1, value=value)
    except WORKBOOK_ERRORS as e:
        return _failure(e, file_path=params.file_path, sheet_name=params.sheet_name)

    return success_response(
        message="Row data written successfully",
        file_path=params.file_path,
        sheet_name=params.sheet_name,
        row_index=params.row_index,
        column_count=len(values),
    )


def read_row_data(params: ReadRowInput) -> Dict:
    try:
        with open_workbook(params.file_path) as workbook:
            sheet = get_sheet(workbook, params.sheet_name)
            values = row_values(sheet, params.row_index)
    except WORKBOOK_ERRORS as e:
        return _failure(e, file_path=params.file_path, sheet_name=params.sheet_name)

    return success_response(
        values=values,
        file_path=params.file_path,
        sheet_name=params.sheet_name,
        row_index=params.row_index,
        column_count=len(values),
        exists=bool(values),
    )


def list_worksheets(params: WorkbookInput) -> Dict:
    try:
        with open_workbook(params.file_path) as workbook:
            names = list(workbook.sheetnames)
    except WORKBOOK_ERRORS as e:
        return _failure(e, file_path=params.file_path)

    return success_response(worksheets=names, count=len(names), file_path=params.file_path)


def import_csv(params: ImportCsvInput) -> Dict:
    """Copy CSV rows into a worksheet, starting at the first row."""
    context = {"excel_path": params.excel_path, "csv_path": params.csv_path}
    csv_file = Path(params.csv_path)
    if not Path(params.excel_path).exists():
        return error_response(f"Excel file does not exist: {params.excel_path}", **context)
    if not csv_file.exists():
        return error_response(f"CSV file does not exist: {params.csv_path}", **context)

    try:
        with open(csv_file, encoding="utf-8", newline="") as f:
            rows = list(csv.reader(f, delimiter=params.delimiter))
        if not rows:
            raise WorkbookError("CSV file is empty")

        with open_workbook(params.excel_path, save=True) as workbook:
            if params.sheet_name in workbook.sheetnames:
                sheet = workbook[params.sheet_name]
            else:
                sheet = workbook.create_sheet(params.sheet_name)

            for row_number, row in enumerate(rows, start=1):
                for col_number, value in enumerate(row, start=1):
                    sheet.cell(row=row_number, column=col_number, value=value.strip())
    except (csv.Error, UnicodeDecodeError) + WORKBOOK_ERRORS as e:
        return _failure(e, **context)

    return success_response(
        message="CSV data imported successfully",
        sheet_name=params.sheet_name,
        row_count=len(rows),
        **context,
    )


def export_to_csv(params: ExportCsvInput) -> Dict:
    """Write a worksheet to CSV, skipping rows that hold no data."""
    try:
        with open_workbook(params.excel_path) as workbook:
            sheet = get_sheet(workbook, params.sheet_name)
            rows = [row_values(sheet, i) for i in range(sheet.max_row)]
        rows = [row for row in rows if row]

        with open(params.csv_path, "w", encoding="utf-8", newline="") as f:
            csv.writer(f, delimiter=params.delimiter).writerows(rows)
    except (csv.Error,) + WORKBOOK_ERRORS as e:
        return _failure(e, excel_path=params.excel_path, sheet_name=params.sheet_name)

    return success_response(
        message="Worksheet exported successfully",
        excel_path=params.excel_path,
        csv_path=params.csv_path,
        sheet_name=params.sheet_name,
        row_count=len(rows),
    )


def merge_cells(params: MergeCellsInput) -> Dict:
    context = {"file_path": params.file_path, "sheet_name": params.sheet_name}
    if params.last_row < params.first_row or params.last_col < params.first_col:
        return error_response(
            "Invalid range: last row/column must not precede first row/column", **context
        )

    try:
        with open_workbook(params.file_path, save=True) as workbook:
            sheet = get_sheet(workbook, params.sheet_name)
            sheet.merge_cells(
                start_row=params.first_row + 1,
                start_column=params.first_col + 1,
                end_row=params.last_row + 1,
                end_column=params.last_col + 1,
            )
    except WORKBOOK_ERRORS as e:
        return _failure(e, **context)

    return success_response(
        message="Cells merged successfully",
        range=f"({params.first_row},{params.first_col}):({params.last_row},{params.last_col})",
        **context,
    )
