# src/idx_wrapper/model.py
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

FETCH_FAILURE_MESSAGE = "Did not recieve a 200 http code"


class TargetKind(str, Enum):
    """The addressing schemes a target element can be located with."""
    ID = "id"
    ELEMENT = "element"
    CLASS = "class"
    SELECTOR = "selector"


class TargetSpec(BaseModel):
    """Describes how to locate the single element that receives the IDX markers."""
    kind: TargetKind
    value: str


class WrapRequest(BaseModel):
    """
    The invocation parameters of a wrap, as they arrive on the query string.

    The 'y' flags are normalised to booleans; the per-kind value fields keep
    their query-string names as aliases so a request dict can be validated as-is.
    """
    model_config = ConfigDict(populate_by_name=True)

    site: str = Field(min_length=1)
    title: str = ""
    target: Optional[str] = None
    target_id: Optional[str] = Field(default=None, alias="id")
    element: Optional[str] = Field(default=None, alias="el")
    css_class: Optional[str] = Field(default=None, alias="class")
    target_value: Optional[str] = Field(default=None, alias="targetValue")
    h1_ignore: bool = Field(default=False, alias="h1Ignore")
    remove_conflicts: bool = Field(default=False, alias="removeConflicts")
    remove_scripts: bool = Field(default=False, alias="removeScripts")

    @field_validator("h1_ignore", "remove_conflicts", "remove_scripts", mode="before")
    @classmethod
    def parse_flag(cls, v):
        if isinstance(v, bool):
            return v
        if v is None:
            return False
        return str(v) == "y"

    @field_validator("title", mode="before")
    @classmethod
    def default_title(cls, v):
        return "" if v is None else v

    def target_spec(self) -> Optional[TargetSpec]:
        """
        Builds the TargetSpec for this request. Returns None when the target
        kind is missing or unknown. A missing value yields an empty one,
        which never matches an element.
        """
        try:
            kind = TargetKind(self.target)
        except ValueError:
            return None

        if kind is TargetKind.ID:
            value = self.target_id
        elif kind is TargetKind.ELEMENT:
            value = self.element
        elif kind is TargetKind.CLASS:
            value = self.css_class
        else:
            value = self.target_value

        return TargetSpec(kind=kind, value=value or "")


class FetchResult(BaseModel):
    """Outcome of a page fetch: HTTP status and body, or the transport error."""
    url: str
    status_code: int
    body: Optional[str] = None
    error: Optional[str] = None
    final_url: Optional[str] = None
    elapsed_time: float = 0.0

    @property
    def success(self) -> bool:
        """Check if the fetch was successful (no error and 2xx status code)."""
        return self.error is None and 200 <= self.status_code < 300


class WrapFailure(BaseModel):
    """The structured error returned instead of HTML when the site could not be fetched."""
    model_config = ConfigDict(populate_by_name=True)

    error: str = FETCH_FAILURE_MESSAGE
    site_requested: str = Field(alias="siteRequested")

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


WrapOutcome = Union[str, WrapFailure]
