import uuid
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, model_validator


class FieldType(str, Enum):
    TEXT = "text"
    LONG_TEXT = "long_text"
    EMAIL = "email"
    PHONE = "phone"
    NUMBER = "number"
    DATE = "date"
    DROPDOWN = "dropdown"
    CHECKBOX = "checkbox"
    RATING = "rating"
    STATUS = "status"
    TAGS = "tags"
    PEOPLE = "people"
    HOUR = "hour"
    WEEK = "week"
    WORLD_CLOCK = "world_clock"
    FORMULA = "formula"
    MIRROR = "mirror"
    ITEM_ID = "item_id"
    DEPENDENCY = "dependency"


# Types whose answer is picked from `options`
CHOICE_TYPES = frozenset({FieldType.DROPDOWN, FieldType.STATUS, FieldType.TAGS})


class ConditionOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"


Action = Literal["show", "hide"]


class Condition(BaseModel):
    fieldId: str = ""
    # Unknown operator strings are kept as-is; the evaluator treats them as met
    operator: Union[ConditionOperator, str] = Field(
        default=ConditionOperator.EQUALS, union_mode="left_to_right"
    )
    value: str = ""


class FieldLogic(BaseModel):
    conditions: List[Condition] = Field(default_factory=list)
    action: Action = "show"


class FormField(BaseModel):
    id: str
    type: FieldType
    label: str
    required: bool = False
    placeholder: Optional[str] = None
    options: Optional[List[str]] = None
    logic: Optional[FieldLogic] = None
    mondayColumnId: Optional[str] = None
    mondayColumnType: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def assign_id(cls, data):
        if isinstance(data, dict) and not data.get("id"):
            data = {**data, "id": str(uuid.uuid4())}
        return data

    @model_validator(mode="after")
    def check_options(self):
        if self.type in CHOICE_TYPES:
            if not self.options:
                raise ValueError(f"{self.type.value} field '{self.id}' needs at least one option")
        elif self.options is not None:
            raise ValueError(f"{self.type.value} field '{self.id}' does not take options")
        return self


class FormTheme(BaseModel):
    primaryColor: str = "#0073ea"
    backgroundColor: str = "#ffffff"
    fontFamily: str = "Roboto, sans-serif"


class FormSettings(BaseModel):
    allowUpdate: bool = False
    allowSubItems: bool = False
    prefillEnabled: bool = False
    customTheme: Optional[FormTheme] = None
    successMessage: str = "Thank you! Your response has been submitted."
    redirectUrl: Optional[str] = None


def _check_unique_ids(fields: List[FormField]) -> None:
    seen = set()
    for f in fields:
        if f.id in seen:
            raise ValueError(f"Duplicate field id '{f.id}'")
        seen.add(f.id)


class FormIn(BaseModel):
    title: str
    description: str = ""
    boardId: str
    workspaceId: str = ""
    fields: List[FormField] = Field(default_factory=list)
    settings: FormSettings = Field(default_factory=FormSettings)
    isActive: bool = True

    @model_validator(mode="after")
    def check_field_ids(self):
        _check_unique_ids(self.fields)
        return self


class FormUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    boardId: Optional[str] = None
    workspaceId: Optional[str] = None
    fields: Optional[List[FormField]] = None
    settings: Optional[FormSettings] = None
    isActive: Optional[bool] = None

    @model_validator(mode="after")
    def check_field_ids(self):
        if self.fields is not None:
            _check_unique_ids(self.fields)
        return self


class Form(FormIn):
    id: str
    submissionCount: int = 0
    createdAt: Optional[Any] = None
    updatedAt: Optional[Any] = None

    def field(self, field_id: str) -> Optional[FormField]:
        for f in self.fields:
            if f.id == field_id:
                return f
        return None


class SubmissionIn(BaseModel):
    formId: str
    answers: Dict[str, str] = Field(
        default_factory=dict, validation_alias=AliasChoices("answers", "data")
    )
    externalItemId: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("externalItemId", "mondayItemId")
    )


class EvaluateIn(BaseModel):
    answers: Dict[str, str] = Field(default_factory=dict)


class ItemCreateIn(BaseModel):
    itemName: str
    columnValues: Dict[str, Any] = Field(default_factory=dict)
    groupId: Optional[str] = None
    createSubItem: bool = False
    parentItemId: Optional[str] = None


class ItemUpdateIn(BaseModel):
    columnValues: Dict[str, Any]


# Answer Snapshot values are always strings; these helpers cover the
# multi-valued encodings.

def encode_tags(selected: List[str]) -> str:
    return ",".join(s for s in selected if s)


def decode_tags(value: str) -> List[str]:
    return [s for s in value.split(",") if s]


def encode_checkbox(checked: bool) -> str:
    return "true" if checked else "false"


def decode_checkbox(value: str) -> bool:
    return value == "true"
