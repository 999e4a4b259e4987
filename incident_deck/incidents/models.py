# incidents/models.py

from typing import List, Optional
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ValidationInfo, field_validator

from incident_deck import config


class IncidentStatus(str, Enum):
    OPEN = "OPEN"
    MITIGATED = "MITIGATED"
    RESOLVED = "RESOLVED"


class IncidentSeverity(str, Enum):
    SEV1 = "SEV1"
    SEV2 = "SEV2"
    SEV3 = "SEV3"
    SEV4 = "SEV4"


# Most to least severe
SEVERITY_ORDER = [IncidentSeverity.SEV1, IncidentSeverity.SEV2, IncidentSeverity.SEV3, IncidentSeverity.SEV4]

SEVERITY_LABELS = {
    IncidentSeverity.SEV1: "Critical",
    IncidentSeverity.SEV2: "High",
    IncidentSeverity.SEV3: "Medium",
    IncidentSeverity.SEV4: "Low",
}


def severity_rank(severity: IncidentSeverity) -> int:
    return SEVERITY_ORDER.index(IncidentSeverity(severity))


class SortField(str, Enum):
    ID = "id"
    TITLE = "title"
    SEVERITY = "severity"
    STATUS = "status"
    CREATED_AT = "createdAt"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


DEFAULT_SORT_FIELD = SortField.CREATED_AT
DEFAULT_SORT_ORDER = SortOrder.DESC


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class Incident(BaseModel):
    id: str
    title: str
    service: str
    severity: IncidentSeverity
    status: IncidentStatus
    owner: Optional[str] = None
    summary: Optional[str] = None
    createdAt: datetime
    updatedAt: datetime


# ---
# Request body for POST /incidents.
# Title and service must be non-empty; severity/status only accept the enumerated values.
# ---
class IncidentCreate(BaseModel):
    title: str
    service: str
    severity: IncidentSeverity
    status: IncidentStatus = IncidentStatus.OPEN
    owner: Optional[str] = None
    summary: Optional[str] = None

    @field_validator("title", "service")
    @classmethod
    def required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    # Unselected status falls back to OPEN
    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, value):
        if _blank_to_none(value) is None:
            return IncidentStatus.OPEN
        return value

    @field_validator("owner", "summary", mode="before")
    @classmethod
    def optional_text(cls, value):
        return _blank_to_none(value)


# ---
# Request body for PATCH /incidents/{id}. Every field is optional;
# only the fields explicitly set are sent.
# ---
class IncidentUpdate(BaseModel):
    title: Optional[str] = None
    service: Optional[str] = None
    severity: Optional[IncidentSeverity] = None
    status: Optional[IncidentStatus] = None
    owner: Optional[str] = None
    summary: Optional[str] = None

    @field_validator("title", "service")
    @classmethod
    def required_text(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    # Blank owner/summary clears the field
    @field_validator("owner", "summary", mode="before")
    @classmethod
    def optional_text(cls, value):
        return _blank_to_none(value)


# ---
# Filters shared by the listing and counts endpoints.
# Empty strings coming from filter selects mean "no filter".
# ---
class CountsQuery(BaseModel):
    status: Optional[IncidentStatus] = None
    severity: Optional[IncidentSeverity] = None
    service: Optional[str] = None
    search: Optional[str] = None

    @field_validator("status", "severity", "service", "search", mode="before")
    @classmethod
    def empty_is_absent(cls, value):
        return _blank_to_none(value)

    def to_params(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


class ListQuery(CountsQuery):
    limit: int = config.DEFAULT_PAGE_SIZE
    sort: SortField = DEFAULT_SORT_FIELD
    order: SortOrder = DEFAULT_SORT_ORDER
    cursor: Optional[str] = None

    @field_validator("limit")
    @classmethod
    def allowed_page_size(cls, value: int, info: ValidationInfo) -> int:
        options = (info.context or {}).get("page_size_options", config.PAGE_SIZE_OPTIONS)
        if value not in options:
            raise ValueError(f"page size must be one of {', '.join(str(size) for size in options)}")
        return value

    def counts_query(self) -> CountsQuery:
        return CountsQuery(
            status=self.status,
            severity=self.severity,
            service=self.service,
            search=self.search,
        )


class IncidentListMeta(BaseModel):
    limit: int
    nextCursor: Optional[str] = None
    totalCount: Optional[int] = None
    totalPages: Optional[int] = None

    @field_validator("nextCursor", mode="before")
    @classmethod
    def empty_cursor_is_absent(cls, value):
        return value or None


class IncidentListResponse(BaseModel):
    data: List[Incident]
    meta: IncidentListMeta


class IncidentCounts(BaseModel):
    openCount: int
    activeSev1Count: int
    totalCount: int


class IncidentFilterOptions(BaseModel):
    services: List[str] = []
    severities: List[IncidentSeverity] = []
    statuses: List[IncidentStatus] = []
