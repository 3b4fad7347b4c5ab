"""Import a parsed document into the host as a publication with chapters."""

import logging
import re
import secrets
import unicodedata

from bookclub_import.config import UNTITLED_PUBLICATION, ImportOptions, PublicationStyle
from bookclub_import.exceptions import ImportFailure, StoreError
from bookclub_import.models.document import ParsedDocument, ParsedSection
from bookclub_import.models.publication import (
    ChapterConfig,
    Collection,
    PublicationConfig,
    Thread,
    User,
)
from bookclub_import.models.result import ImportResult
from bookclub_import.store.ports import AssetUploader, CollectionStore, ThreadStore

log = logging.getLogger(__name__)


def generate_slug(title: str | None) -> str:
    """Convert a title to a lowercase ASCII slug with hyphens.

    Falls back to ``untitled-<hex>`` when nothing usable is left.
    """
    if not title:
        return f"untitled-{secrets.token_hex(4)}"

    slug = unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode()
    slug = slug.lower()
    # Remove everything but letters, digits, whitespace and hyphens
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    slug = slug.strip("-")

    return slug or f"untitled-{secrets.token_hex(4)}"


class DocumentImporter:
    """Create or update a publication and its chapters from a parsed document.

    The publication is all-or-nothing: if it cannot be found or created,
    nothing is kept. Chapters are best effort: each one runs in its own
    savepoint, and a failure is recorded before moving to the next one.
    """

    def __init__(
        self,
        collections: CollectionStore,
        threads: ThreadStore,
        uploader: AssetUploader | None = None,
        style: PublicationStyle | None = None,
    ):
        self.collections = collections
        self.threads = threads
        self.uploader = uploader
        self.style = style or PublicationStyle()

    def import_document(
        self,
        user: User,
        document: ParsedDocument,
        options: ImportOptions | None = None,
    ) -> ImportResult:
        """Import ``document`` on behalf of ``user``."""
        options = options or ImportOptions()
        try:
            with self.collections.transaction():
                return self._run(user, document, options)
        except (ImportFailure, StoreError) as e:
            log.warning(f"Import rolled back: {e}")
            return ImportResult.failed(str(e))
        except Exception as e:
            log.exception("Import failed unexpectedly")
            return ImportResult.failed(str(e))

    def _run(
        self, user: User, document: ParsedDocument, options: ImportOptions
    ) -> ImportResult:
        if options.publication_id is not None:
            publication = self._find_publication(options.publication_id)
        else:
            publication = self._create_publication(user, document, options)

        result = ImportResult(success=False, publication=publication)
        existing = self._existing_chapters(publication)
        log.info(
            f"Importing {len(document.sections)} section(s) into "
            f"'{publication.name}' ({len(existing)} existing chapter(s))"
        )

        failures = 0
        for section in document.sections:
            try:
                with self.collections.transaction():
                    self._import_section(user, publication, section, existing, options, result)
            except Exception as e:
                log.warning(f"Section {section.number} failed: {e}")
                result.errors.append(f"Error with chapter '{section.title}': {e}")
                failures += 1

        if document.cover_image:
            self._upload_cover(publication, document.cover_image, result)

        # Skipped duplicates are reported in errors but are not failures
        result.success = (
            failures == 0
            or bool(result.chapters_created)
            or bool(result.chapters_updated)
        )
        log.info(
            f"Import finished: {len(result.chapters_created)} created, "
            f"{len(result.chapters_updated)} updated, {len(result.errors)} error(s)"
        )
        return result

    # -- Publication ---------------------------------------------------------

    def _find_publication(self, publication_id: int) -> Collection:
        collection = self.collections.find_collection(publication_id)
        config = self.collections.get_publication_config(collection) if collection else None
        if collection is None or config is None or not config.enabled:
            raise ImportFailure(f"Publication {publication_id} not found")
        return collection

    def _create_publication(
        self, user: User, document: ParsedDocument, options: ImportOptions
    ) -> Collection:
        slug = options.slug or generate_slug(document.title)
        if self.collections.find_publication_by_slug(slug) is not None:
            raise ImportFailure(f"A publication with slug '{slug}' already exists")

        try:
            publication = self.collections.create_collection(
                name=document.title or UNTITLED_PUBLICATION,
                owner=user,
                color=self.style.color,
                text_color=self.style.text_color,
            )
        except StoreError as e:
            raise ImportFailure(f"Could not create publication: {e}") from e

        self.collections.save_publication_config(
            publication,
            PublicationConfig(
                enabled=True,
                slug=slug,
                type=document.type or "book",
                description=document.description,
                author_ids=[user.id],
            ),
        )
        log.info(f"Created publication '{publication.name}' ({slug})")
        return publication

    def _upload_cover(
        self, publication: Collection, image: bytes, result: ImportResult
    ) -> None:
        if self.uploader is None:
            log.info("No asset uploader configured, leaving cover unset")
            result.warnings.append("Cover image found but not uploaded")
            return

        try:
            url = self.uploader.upload_cover(publication, image)
        except Exception as e:
            log.warning(f"Cover upload failed: {e}")
            result.warnings.append(f"Cover upload failed: {e}")
            return

        config = self.collections.get_publication_config(publication)
        try:
            self.collections.save_publication_config(
                publication, config.model_copy(update={"cover_url": url})
            )
        except Exception as e:
            log.warning(f"Could not save cover URL: {e}")
            result.warnings.append(f"Cover upload failed: {e}")

    # -- Chapters ------------------------------------------------------------

    def _existing_chapters(
        self, publication: Collection
    ) -> list[tuple[Collection, ChapterConfig]]:
        chapters = []
        for child in self.collections.list_children(publication):
            config = self.collections.get_chapter_config(child)
            if config is not None and config.enabled:
                chapters.append((child, config))
        return chapters

    def _match_chapter(
        self,
        existing: list[tuple[Collection, ChapterConfig]],
        section: ParsedSection,
        result: ImportResult,
    ) -> tuple[Collection, ChapterConfig] | None:
        """Find the chapter a section corresponds to: by number, then by title."""
        title = section.title.strip().lower()
        by_number = next(
            (entry for entry in existing if entry[1].number == section.number), None
        )
        by_title = next(
            (entry for entry in existing if entry[0].name.strip().lower() == title), None
        )

        if by_number and by_title and by_number[0].id != by_title[0].id:
            result.warnings.append(
                f"'{section.title}' matches chapter {section.number} "
                f"('{by_number[0].name}') by number and chapter "
                f"{by_title[1].number} by title; using the number match"
            )
        return by_number or by_title

    def _import_section(
        self,
        user: User,
        publication: Collection,
        section: ParsedSection,
        existing: list[tuple[Collection, ChapterConfig]],
        options: ImportOptions,
        result: ImportResult,
    ) -> None:
        match = self._match_chapter(existing, section, result)

        if match is None:
            self._create_chapter(user, publication, section, options)
            result.chapters_created.append(section.title)
        elif options.replace_existing:
            chapter, config = match
            self._update_chapter(user, chapter, config, section)
            result.chapters_updated.append(section.title)
        else:
            result.errors.append(f"Skipped '{section.title}' - already exists")

    def _create_chapter(
        self,
        user: User,
        publication: Collection,
        section: ParsedSection,
        options: ImportOptions,
    ) -> Collection:
        chapter = self.collections.create_collection(
            name=section.title,
            owner=user,
            parent=publication,
            color=publication.color,
            text_color=publication.text_color,
        )
        thread = self._create_content_thread(user, chapter, section)

        self.collections.save_chapter_config(
            chapter,
            ChapterConfig(
                number=section.number,
                published=options.publish,
                access_level=options.access_level,
                word_count=section.word_count,
                review_status="approved" if options.publish else "draft",
                content_thread_id=thread.id,
            ),
        )
        log.debug(f"Created chapter {section.number}: {section.title}")
        return chapter

    def _update_chapter(
        self,
        user: User,
        chapter: Collection,
        config: ChapterConfig,
        section: ParsedSection,
    ) -> None:
        thread = (
            self.threads.find_thread(config.content_thread_id)
            if config.content_thread_id is not None
            else None
        )

        if thread is None:
            thread = self._create_content_thread(user, chapter, section)
        else:
            post = self.threads.first_post(thread)
            if post is None:
                self.threads.create_first_post(thread, user, section.content)
            else:
                self.threads.revise_post(post, user, section.content)

        self.collections.save_chapter_config(
            chapter,
            config.model_copy(
                update={"word_count": section.word_count, "content_thread_id": thread.id}
            ),
        )
        log.debug(f"Updated chapter {config.number}: {chapter.name}")

    def _create_content_thread(
        self, user: User, chapter: Collection, section: ParsedSection
    ) -> Thread:
        thread = self.threads.create_thread(
            title=section.title, owner=user, collection=chapter, pinned=True
        )
        self.threads.create_first_post(thread, user, section.content)
        return thread
