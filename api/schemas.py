from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field

CategoryField = Literal["sex", "smoker", "day", "time"]
NumericField = Literal["tip", "total_bill", "size"]


class SelectionModel(BaseModel):
    target_category: CategoryField = "sex"
    active_field: NumericField = "tip"
    selected_cell: Optional[Tuple[NumericField, NumericField]] = None


class CategoryChanged(BaseModel):
    kind: Literal["category_changed"] = "category_changed"
    category: CategoryField


class FieldChanged(BaseModel):
    kind: Literal["field_changed"] = "field_changed"
    field: NumericField


class CellClicked(BaseModel):
    kind: Literal["cell_clicked"] = "cell_clicked"
    row: int
    column: int


SelectionEvent = Annotated[Union[CategoryChanged, FieldChanged, CellClicked], Field(discriminator="kind")]


class SelectionEventRequest(BaseModel):
    selection: SelectionModel = Field(default_factory=SelectionModel)
    event: SelectionEvent


class SelectionEventResponse(BaseModel):
    selection: SelectionModel
    invalidated: List[Literal["bar", "scatter"]]


class MetaFieldsResponse(BaseModel):
    numeric_fields: List[str]
    category_fields: List[str]
