"""File handling modules for CLI tools."""

from __future__ import annotations

from collections.abc import Iterable
from csv import DictReader as CSVReader, DictWriter as CSVWriter
from dataclasses import dataclass, field
from json import dumps as json_dumps, loads as json_loads
from typing import TYPE_CHECKING, Literal

from openpyxl import load_workbook as openpyxl_load_workbook
from openpyxl.workbook import Workbook as OpenPyXLWorkbook

if TYPE_CHECKING:
    from pathlib import Path

    from telnet_runner.types import JSON_TYPE


@dataclass(slots=True)
class FileReader:
    """Read a host inventory from a file."""

    path: Path
    type: Literal["csv", "json", "xlsx"]
    data: JSON_TYPE = field(init=False)

    def __post_init__(self) -> None:
        """Initialise the file reader.

        Raises:
            ValueError: If the file type is invalid.
        """
        match self.type:
            case "csv":
                self._read_csv()
            case "json":
                self._read_json()
            case "xlsx":
                self._read_xlsx()
            case _:
                msg = f"Invalid file type: {self.type}"
                raise ValueError(msg)

    def _read_csv(self) -> None:
        """Read data from a CSV file."""
        self.data = list(CSVReader(self.path.read_text().splitlines()))

    def _read_json(self) -> None:
        """Read data from a JSON file."""
        self.data = json_loads(self.path.read_text())

    def _read_xlsx(self) -> None:
        """Read data from an Excel XLSX file."""
        worksheet = openpyxl_load_workbook(filename=self.path, data_only=True, read_only=True).active
        rows = worksheet.iter_rows(values_only=True)
        headers = next(rows, ())
        self.data = [dict(zip(headers, row, strict=False)) for row in rows if any(cell is not None for cell in row)]


def read_script(path: Path) -> list[str]:
    """Read commands from a script file, one per line.

    Blank lines and lines starting with ``#`` are skipped.

    Returns:
        The commands in file order
    """
    return [
        line.rstrip("\r\n")
        for line in path.read_text().splitlines()
        if line.strip() and not line.lstrip().startswith("#")
    ]


@dataclass(slots=True)
class FileWriter:
    """Write session results to a file in various formats."""

    path: Path
    type: Literal["csv", "json", "plain", "xlsx"]
    data: list[dict[str, JSON_TYPE]]

    def __post_init__(self) -> None:
        """Initialise the file writer.

        Raises:
            ValueError: If the file type is invalid.
        """
        match self.type:
            case "csv":
                self._write_csv()
            case "json":
                self._write_json()
            case "plain":
                self._write_plain()
            case "xlsx":
                self._write_xlsx()
            case _:
                msg = f"Invalid file type: {self.type}"
                raise ValueError(msg)

    def _write_csv(self) -> None:
        """Write data to a CSV file."""
        with self.path.open("w", newline="") as handle:
            writer = CSVWriter(handle, fieldnames=list(self.data[0].keys()) if self.data else [])
            writer.writeheader()
            for row in self.data:
                writer.writerow(row)

    def _write_json(self) -> None:
        """Write data to a JSON file."""
        self.path.write_text(json_dumps(self.data, indent=2))

    def _write_plain(self) -> None:
        """Write data to a plain text file, one record per block."""
        self.path.write_text(format_plain(self.data))

    def _write_xlsx(self) -> None:
        """Write data to an Excel XLSX file.

        Raises:
            ValueError: If the data is empty.
        """
        if not self.data:
            msg = "No data to write to file"
            raise ValueError(msg)
        workbook = OpenPyXLWorkbook()
        worksheet = workbook.active
        headers = list(self.data[0].keys())
        worksheet.append(headers)
        for row in self.data:
            worksheet.append([_cell_value(row.get(header)) for header in headers])
        workbook.save(self.path)


def format_plain(data: list[dict[str, JSON_TYPE]]) -> str:
    """Render records as "key: value" lines separated by blank lines.

    Returns:
        The formatted text
    """
    return "\n\n".join("\n".join(f"{key}: {value}" for key, value in record.items()) for record in data)


def _cell_value(value: JSON_TYPE) -> JSON_TYPE:
    # Spreadsheet cells take scalars only
    if isinstance(value, Iterable) and not isinstance(value, str):
        return json_dumps(value)
    return value
