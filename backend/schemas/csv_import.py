"""
backend/schemas/csv_import.py

Pydantic models returned by the CSV expense import endpoint.
The JSON shape is camelCase:

    { "successCount": 2, "errorCount": 1,
      "errors": [ { "lineNumber": 3, "message": "...", "rawData": "..." } ] }
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CSVImportError(BaseModel):
    """One rejected line (or the single fatal parse failure)."""
    model_config = ConfigDict(populate_by_name=True)

    line_number: int = Field(alias="lineNumber")
    message: str
    raw_data: Optional[str] = Field(default=None, alias="rawData")


class ImportResult(BaseModel):
    """Aggregate outcome of one import call."""
    model_config = ConfigDict(populate_by_name=True)

    success_count: int = Field(default=0, alias="successCount")
    error_count: int = Field(default=0, alias="errorCount")
    errors: List[CSVImportError] = Field(default_factory=list)
