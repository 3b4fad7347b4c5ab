"""Result model returned by the importer."""

from pydantic import BaseModel, Field

from bookclub_import.models.publication import Collection


class ImportResult(BaseModel):
    """Outcome of one import call.

    ``success`` is true when anything was created or updated, or when
    nothing went wrong at all. ``errors`` holds one entry per failed or
    skipped section, or the single fatal cause when the import rolled back.
    """

    success: bool
    publication: Collection | None = None
    chapters_created: list[str] = Field(default_factory=list)
    chapters_updated: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def failed(cls, message: str) -> "ImportResult":
        """Result for an import that was rolled back."""
        return cls(success=False, errors=[message])
