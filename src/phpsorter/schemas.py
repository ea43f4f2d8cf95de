from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional

VisibilityName = Literal["public", "protected", "private"]


class SorterConfig(BaseModel):
    """
    Settings for one sort invocation. Immutable for the run.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    add_visibility_spacing: bool = True
    sort_properties: bool = True
    sort_traits: bool = True
    sort_namespace_uses: bool = True
    sort_constants: bool = True
    default_visibility: VisibilityName = "public"
    remove_unused_imports: bool = True
    add_newline_between_const_and_properties: bool = True


class GroupChange(BaseModel):
    """
    A group of elements that was rewritten in place.
    """
    category: str
    start_line: int
    end_line: int
    element_count: int


class RemovedImport(BaseModel):
    """
    A namespace import deleted because it was unused.
    """
    text: str
    start_line: int
    end_line: int


class SortReport(BaseModel):
    """
    Outcome of one "sort elements" invocation.
    """
    file_path: Optional[str] = None
    rewritten_groups: List[GroupChange] = Field(default_factory=list)
    removed_imports: List[RemovedImport] = Field(default_factory=list)
    normalized_regions: int = 0
    changed: bool = False


class DiagnosticEntry(BaseModel):
    """
    One diagnostic from an external analyser's JSON report.

    Either `line` (1-indexed) or `row` (0-indexed) locates it.
    """
    message: str
    line: Optional[int] = Field(default=None, ge=1)
    row: Optional[int] = Field(default=None, ge=0)
    source: str = "external"
