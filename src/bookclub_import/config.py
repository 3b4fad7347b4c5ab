"""Import options and defaults."""

from pydantic import BaseModel, Field

DEFAULT_ACCESS_LEVEL = "free"
UNTITLED_PUBLICATION = "Untitled Book"


class ImportOptions(BaseModel):
    """Options for one import call.

    Attributes:
        publication_id: Import into this existing publication instead of
            creating a new one.
        slug: Slug for a newly created publication (default: from title).
        publish: Mark new chapters published and approved instead of draft.
        access_level: Access level applied to every new chapter.
        replace_existing: Update matching chapters instead of skipping them.
    """

    publication_id: int | None = None
    slug: str | None = None
    publish: bool = False
    access_level: str = Field(default=DEFAULT_ACCESS_LEVEL, min_length=1)
    replace_existing: bool = False


class PublicationStyle(BaseModel):
    """Colors given to new publications. Chapters copy their publication's."""

    color: str = "B25A27"
    text_color: str = "FFFFFF"
