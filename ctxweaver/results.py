"""
Result models of a processing run (JSON-serializable via model_dump).
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ActionName = Literal["skip", "insert", "update", "remove"]


class FunctionAction(BaseModel):
    model_config = ConfigDict(extra="forbid")

    function: str
    line: int
    action: ActionName


class FunctionError(BaseModel):
    """A function that could not be processed; its file is left untouched."""
    model_config = ConfigDict(extra="forbid")

    function: str
    line: int
    message: str


class FileResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str = ""
    package_path: str = ""
    modified: bool = False
    # Reason the whole file was left alone ("directive", "generated")
    skipped: Optional[str] = None
    actions: List[FunctionAction] = Field(default_factory=list)
    errors: List[FunctionError] = Field(default_factory=list)
    # Transformed source; not part of the JSON report
    text: Optional[str] = Field(default=None, exclude=True)

    @property
    def ok(self) -> bool:
        return not self.errors


class ProcessResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    files_processed: int = 0
    files_modified: int = 0
    files: List[FileResult] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors and all(f.ok for f in self.files)


__all__ = ["ActionName", "FunctionAction", "FunctionError", "FileResult", "ProcessResult"]
