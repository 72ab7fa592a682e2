"""
Job posting and blog post models.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_COMPANY = "Confidential"
DEFAULT_SALARY = "Not Specified"
DEFAULT_JOB_TYPE = "Full-time"

REQUIRED_FIELDS = ("title", "location", "requirements")


class JobFields(BaseModel):
    """Structured description of one job posting.

    Accepts the camelCase names used by batch files and the extraction prompt
    (``applyLink``) as well as the snake_case attribute names.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: Optional[str] = None
    location: Optional[str] = None
    requirements: Optional[str] = None
    company: str = DEFAULT_COMPANY
    salary: str = DEFAULT_SALARY
    type: str = DEFAULT_JOB_TYPE
    apply_link: Optional[str] = None
    apply_email: Optional[str] = None
    interview_date: Optional[str] = None
    interview_time: Optional[str] = None
    interview_location: Optional[str] = None
    labels: List[str] = Field(default_factory=list)

    @field_validator(
        "title",
        "location",
        "requirements",
        "apply_link",
        "apply_email",
        "interview_date",
        "interview_time",
        "interview_location",
        mode="before",
    )
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("company", "salary", "type", mode="before")
    @classmethod
    def _text_with_default(cls, value: Any, info) -> str:
        defaults = {"company": DEFAULT_COMPANY, "salary": DEFAULT_SALARY, "type": DEFAULT_JOB_TYPE}
        text = str(value).strip() if value is not None else ""
        return text or defaults[info.field_name]

    @field_validator("labels", mode="before")
    @classmethod
    def _labels(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        elif not isinstance(value, (list, tuple, set)):
            raise ValueError("labels must be a list of strings")
        labels: List[str] = []
        for label in value:
            text = str(label).strip()
            if text and text not in labels:
                labels.append(text)
        return labels

    def missing_required(self) -> List[str]:
        """Names of required fields that are absent."""
        return [name for name in REQUIRED_FIELDS if not getattr(self, name)]

    def post_title(self) -> str:
        return f"{self.title} - {self.location}"

    @property
    def has_interview(self) -> bool:
        return bool(self.interview_date)


class GeneratedPost(BaseModel):
    """A blog post as reported by the post store."""

    id: str
    title: str = ""
    url: Optional[str] = None
    status: Optional[str] = None
    content: Optional[str] = None
    published: Optional[str] = None
    labels: List[str] = Field(default_factory=list)

    @classmethod
    def from_api(cls, resource: Dict[str, Any]) -> "GeneratedPost":
        """Build a post from a Blogger v3 post resource."""
        return cls(
            id=str(resource["id"]),
            title=resource.get("title") or "",
            url=resource.get("url"),
            status=resource.get("status"),
            content=resource.get("content"),
            published=resource.get("published"),
            labels=resource.get("labels") or [],
        )

    @property
    def is_draft(self) -> bool:
        return self.status == "DRAFT"
