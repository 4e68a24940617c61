"""Request and response contracts for the scrape proxy."""

from __future__ import annotations

from urllib.parse import urlparse

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

NO_TITLE = "No title found"
NO_SUMMARY = "No summary available."


class ScrapeRequest(BaseModel):
    """Body accepted by ``POST /api/scrape`` and forwarded upstream as-is."""

    model_config = ConfigDict(strict=True, populate_by_name=True)

    url: str
    max_depth: int = Field(0, ge=0, le=2, alias="maxDepth")
    follow_links: bool = Field(False, alias="followLinks")
    pages: int = Field(1, ge=1, le=10)
    mobile_view: bool = Field(
        False,
        validation_alias=AliasChoices("mobile_view", "mobileView"),
    )

    @field_validator("url")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if not parsed.scheme or not parsed.netloc or any(c.isspace() for c in value):
            raise PydanticCustomError("url", "Please provide a valid URL.")
        return value

    @field_validator("max_depth", "pages", mode="before")
    @classmethod
    def _whole_number(cls, value: object) -> object:
        # JSON has one number type; 2.0 is the integer 2.
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value

    def to_upstream(self) -> dict:
        return self.model_dump(by_alias=True)


class ScrapeLink(BaseModel):
    href: str
    text: str


class ScrapeResult(BaseModel):
    """Normalized scrape result returned to callers."""

    title: str
    links: list[ScrapeLink]
    textSummary: str


class ProxyScrapeResponse(BaseModel):
    """What the MCP proxy returns. Everything is optional."""

    title: str | None = None
    links: list[ScrapeLink] = []
    textSummary: str | None = None

    @field_validator("links", mode="before")
    @classmethod
    def _upgrade_string_links(cls, value: object) -> object:
        # Older proxies send bare URLs instead of {href, text} objects.
        if value is None:
            return []
        if isinstance(value, list):
            return [{"href": item, "text": item} if isinstance(item, str) else item for item in value]
        return value

    def normalize(self) -> ScrapeResult:
        return ScrapeResult(
            title=self.title or NO_TITLE,
            links=list(self.links),
            textSummary=self.textSummary or NO_SUMMARY,
        )
