"""Input models for the Excel workbook tools. Row and column indexes are 0-based."""

from pydantic import BaseModel, Field


class CreateWorkbookInput(BaseModel):
    file_name: str = Field(
        ..., description="File name; .xlsx is appended when missing", examples=["report.xlsx"]
    )
    sheet_name: str = Field("Sheet1", description="Initial worksheet name")


class WorksheetInput(BaseModel):
    file_path: str = Field(..., description="Excel file path")
    sheet_name: str = Field(..., description="Worksheet name")


class RenameWorksheetInput(BaseModel):
    file_path: str = Field(..., description="Excel file path")
    current_name: str = Field(..., description="Current worksheet name")
    new_name: str = Field(..., description="New worksheet name")


class WriteCellInput(BaseModel):
    file_path: str = Field(..., description="Excel file path")
    sheet_name: str = Field(..., description="Worksheet name")
    row_index: int = Field(..., ge=0, description="Row index (0-based)")
    col_index: int = Field(..., ge=0, description="Column index (0-based)")
    data: str = Field(..., description="Data to write")


class ReadCellInput(BaseModel):
    file_path: str = Field(..., description="Excel file path")
    sheet_name: str = Field(..., description="Worksheet name")
    row_index: int = Field(..., ge=0, description="Row index (0-based)")
    col_index: int = Field(..., ge=0, description="Column index (0-based)")


class WriteRowInput(BaseModel):
    file_path: str = Field(..., description="Excel file path")
    sheet_name: str = Field(..., description="Worksheet name")
    row_index: int = Field(..., ge=0, description="Row index (0-based)")
    data: str = Field(..., description="Data to write, comma-separated", examples=["a, b, c"])


class ReadRowInput(BaseModel):
    file_path: str = Field(..., description="Excel file path")
    sheet_name: str = Field(..., description="Worksheet name")
    row_index: int = Field(..., ge=0, description="Row index (0-based)")


class WorkbookInput(BaseModel):
    file_path: str = Field(..., description="Excel file path")


class ImportCsvInput(BaseModel):
    excel_path: str = Field(..., description="Excel file path")
    csv_path: str = Field(..., description="CSV file path")
    sheet_name: str = Field(
        ..., description="Target worksheet name, created if it does not exist"
    )
    delimiter: str = Field(
        ",", min_length=1, max_length=1, description="CSV delimiter (default is comma)"
    )


class ExportCsvInput(BaseModel):
    excel_path: str = Field(..., description="Excel file path")
    sheet_name: str = Field(..., description="Worksheet name")
    csv_path: str = Field(..., description="CSV output file path")
    delimiter: str = Field(
        ",", min_length=1, max_length=1, description="CSV delimiter (default is comma)"
    )


class MergeCellsInput(BaseModel):
    file_path: str = Field(..., description="Excel file path")
    sheet_name: str = Field(..., description="Worksheet name")
    first_row: int = Field(..., ge=0, description="First row index (0-based)")
    last_row: int = Field(..., ge=0, description="Last row index (0-based)")
    first_col: int = Field(..., ge=0, description="First column index (0-based)")
    last_col: int = Field(..., ge=0, description="Last column index (0-based)")
