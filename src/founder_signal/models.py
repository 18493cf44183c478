from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SignalType = Literal["launch", "request", "pain", "workaround", "unknown"]

SIGNAL_TYPES: tuple[str, ...] = ("launch", "request", "pain", "workaround", "unknown")


class ContentItem(BaseModel):
    """A story as returned by the content source.

    Deleted or dead stories come back with most fields missing, so
    everything except ``id`` is optional.
    """

    id: int
    title: str | None = None
    url: str | None = None
    score: int | None = None
    time: int | None = None
    descendants: int | None = None
    kids: list[int] | None = None
    type: str | None = None


class CommentRecord(BaseModel):
    """A reply as returned by the content source."""

    id: int
    text: str | None = None
    deleted: bool | None = None
    dead: bool | None = None

    @property
    def usable(self) -> bool:
        return not self.deleted and not self.dead and bool(self.text)


class SignalItem(BaseModel):
    """A classified, excerpt-bearing unit of evidence from one post."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1, description="Post title")
    url: str = Field(..., description="External link, or the item page on the source")
    subreddit: str = Field(..., description="Source category (the provider label)")
    score: int = Field(0, description="Upstream score")
    created_utc: int = Field(0, description="Creation time in epoch seconds")
    signal_type: SignalType = Field("unknown", description="Heuristic signal label")
    excerpt: str = Field("", description="Short excerpt, at most 200 characters")


class ExtractionResult(BaseModel):
    """The output of one extraction call."""

    items: list[SignalItem] = Field(default_factory=list)
    error: str | None = Field(
        None, description="Set when the candidate listing could not be fetched"
    )
