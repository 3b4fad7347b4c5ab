"""Data models for parsed documents."""

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, model_validator


class ParsedSection(BaseModel):
    """One ordered section of a parsed document."""

    model_config = ConfigDict(frozen=True)

    number: PositiveInt
    title: str = Field(min_length=1)
    content: str = ""
    word_count: int = Field(default=0, ge=0)


class ParsedDocument(BaseModel):
    """Complete parsed document, independent of where it will be imported."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    author: str | None = None
    description: str | None = None
    type: str = "book"  # "book" | "journal", other values passed through
    sections: list[ParsedSection]
    cover_image: bytes | None = None
    assets: dict[str, bytes] | None = None

    @model_validator(mode="after")
    def _check_numbering(self) -> "ParsedDocument":
        for position, section in enumerate(self.sections, start=1):
            if section.number != position:
                raise ValueError(
                    f"Section numbers must run 1..N in order, "
                    f"got {section.number} at position {position}"
                )
        return self

    @property
    def word_count(self) -> int:
        return sum(section.word_count for section in self.sections)
