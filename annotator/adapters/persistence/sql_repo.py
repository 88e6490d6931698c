# annotator/adapters/persistence/sql_repo.py
import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import structlog
from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    Integer,
    String,
    Select,
    UniqueConstraint,
    case,
    create_engine,
    func,
    or_,
    select,
    text,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from annotator.core.domain.exceptions import DuplicateWordError, RepositoryError, WordNotFoundError
from annotator.core.domain.models import AnnotatedWord, MediaStats, utc_now
from annotator.core.ports.word_repository import IWordRepository

logger = structlog.get_logger()


class Base(DeclarativeBase):
    pass


class AnnotatedWordRow(Base):
    __tablename__ = "annotated_words"
    __table_args__ = (UniqueConstraint("word", "language", name="uq_word_language"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    word: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    language: Mapped[str] = mapped_column(String(16), nullable=False)
    word_type: Mapped[str] = mapped_column(String(32), nullable=False)
    gender: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    syllables: Mapped[list] = mapped_column(JSON, nullable=False)
    safe_letters: Mapped[list] = mapped_column(JSON, nullable=False)
    frequency: Mapped[float] = mapped_column(Float, nullable=False)
    has_audio: Mapped[bool] = mapped_column(Boolean, default=False)
    has_image: Mapped[bool] = mapped_column(Boolean, default=False)
    prooved_by_therapist: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops the offset; stored values are always UTC
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_id(word_id: str) -> Optional[int]:
    try:
        return int(word_id)
    except (TypeError, ValueError):
        return None


def _row_to_model(row: AnnotatedWordRow) -> AnnotatedWord:
    return AnnotatedWord(
        id=str(row.id),
        word=row.word,
        language=row.language,
        word_type=row.word_type,
        gender=row.gender,
        syllables=list(row.syllables),
        safe_letters=list(row.safe_letters),
        frequency=row.frequency,
        has_audio=bool(row.has_audio),
        has_image=bool(row.has_image),
        prooved_by_therapist=bool(row.prooved_by_therapist),
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


class SqlWordRepository(IWordRepository):
    """
    Annotated-word store on a relational database (SQLite, PostgreSQL).

    SQLAlchemy sessions are synchronous; every call runs in a worker
    thread so the event loop is never blocked.
    """

    def __init__(self, database_url: str, echo: bool = False):
        connect_args: dict[str, object] = {}
        if database_url.startswith("sqlite"):
            connect_args = {"check_same_thread": False}

        self.engine = create_engine(database_url, echo=echo, future=True, connect_args=connect_args)
        self.session_factory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
            class_=Session,
        )

    async def initialize(self) -> None:
        try:
            await asyncio.to_thread(Base.metadata.create_all, self.engine)
        except SQLAlchemyError as e:
            logger.error("repo_init_failed", error=str(e))
            raise RepositoryError(f"Failed to initialize database: {e}") from e
        logger.info("repo_initialized", backend="sql")

    async def find_by_word_and_language(self, word: str, language: str) -> Optional[AnnotatedWord]:
        logger.debug("repo_lookup", word=word, language=language)
        return await asyncio.to_thread(self._find, word, language)

    async def insert(self, record: AnnotatedWord) -> AnnotatedWord:
        stored = await asyncio.to_thread(self._insert, record)
        logger.info("word_saved", word=record.word, language=record.language, id=stored.id)
        return stored

    async def health_check(self) -> bool:
        return await asyncio.to_thread(self._ping)

    async def get_by_id(self, word_id: str) -> Optional[AnnotatedWord]:
        return await asyncio.to_thread(self._get, word_id)

    async def list_words(
        self,
        query: str = "",
        language: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> List[AnnotatedWord]:
        return await asyncio.to_thread(self._list, query, language, limit, offset)

    async def count_words(self, query: str = "", language: Optional[str] = None) -> int:
        return await asyncio.to_thread(self._count, query, language)

    async def count_by_language(self) -> Dict[str, int]:
        return await asyncio.to_thread(self._count_by_language)

    async def count_by_media(self) -> MediaStats:
        return await asyncio.to_thread(self._count_by_media)

    async def update(self, word_id: str, changes: Dict[str, Any]) -> AnnotatedWord:
        updated = await asyncio.to_thread(self._update, word_id, changes)
        logger.info("word_updated", id=word_id, fields=sorted(changes))
        return updated

    async def delete(self, word_id: str) -> bool:
        deleted = await asyncio.to_thread(self._delete, word_id)
        if deleted:
            logger.info("word_deleted", id=word_id)
        else:
            logger.warning("word_delete_missing", id=word_id)
        return deleted

    # --- Synchronous internals ---

    def _find(self, word: str, language: str) -> Optional[AnnotatedWord]:
        stmt = (
            select(AnnotatedWordRow)
            .where(AnnotatedWordRow.word == word, AnnotatedWordRow.language == language)
            .limit(1)
        )
        try:
            with self.session_factory() as session:
                row = session.scalars(stmt).first()
                return _row_to_model(row) if row is not None else None
        except SQLAlchemyError as e:
            logger.error("repo_read_failed", word=word, error=str(e))
            raise RepositoryError(f"Failed to fetch word: {e}") from e

    def _insert(self, record: AnnotatedWord) -> AnnotatedWord:
        now = utc_now()
        row = AnnotatedWordRow(
            word=record.word,
            language=record.language,
            word_type=record.word_type.value,
            gender=record.gender.value if record.gender else None,
            syllables=list(record.syllables),
            safe_letters=list(record.safe_letters),
            frequency=record.frequency,
            has_audio=record.has_audio,
            has_image=record.has_image,
            prooved_by_therapist=record.prooved_by_therapist,
            created_at=record.created_at or now,
            updated_at=record.updated_at or now,
        )
        try:
            with self.session_factory() as session:
                session.add(row)
                session.commit()
                session.refresh(row)
                return _row_to_model(row)
        except IntegrityError as e:
            raise DuplicateWordError(record.word, record.language) from e
        except SQLAlchemyError as e:
            logger.error("repo_write_failed", word=record.word, error=str(e))
            raise RepositoryError(f"Failed to save word: {e}") from e

    def _read(self, action: str, fn: Callable[[Session], Any]) -> Any:
        try:
            with self.session_factory() as session:
                return fn(session)
        except SQLAlchemyError as e:
            logger.error("repo_read_failed", action=action, error=str(e))
            raise RepositoryError(f"Failed to {action}: {e}") from e

    @staticmethod
    def _filtered(stmt: Select, query: str, language: Optional[str]) -> Select:
        needle = (query or "").strip()
        if needle:
            pattern = f"%{needle}%"
            stmt = stmt.where(
                or_(AnnotatedWordRow.word.ilike(pattern), AnnotatedWordRow.word_type.ilike(pattern))
            )
        if language:
            stmt = stmt.where(AnnotatedWordRow.language == language)
        return stmt

    def _get(self, word_id: str) -> Optional[AnnotatedWord]:
        row_id = _parse_id(word_id)
        if row_id is None:
            return None

        def fetch(session: Session) -> Optional[AnnotatedWord]:
            row = session.get(AnnotatedWordRow, row_id)
            return _row_to_model(row) if row is not None else None

        return self._read("fetch word", fetch)

    def _list(self, query: str, language: Optional[str], limit: int, offset: int) -> List[AnnotatedWord]:
        stmt = (
            self._filtered(select(AnnotatedWordRow), query, language)
            .order_by(AnnotatedWordRow.created_at.desc(), AnnotatedWordRow.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return self._read("list words", lambda session: [_row_to_model(r) for r in session.scalars(stmt)])

    def _count(self, query: str, language: Optional[str]) -> int:
        stmt = self._filtered(select(func.count()).select_from(AnnotatedWordRow), query, language)
        return self._read("count words", lambda session: int(session.scalar(stmt) or 0))

    def _count_by_language(self) -> Dict[str, int]:
        stmt = (
            select(AnnotatedWordRow.language, func.count())
            .group_by(AnnotatedWordRow.language)
            .order_by(AnnotatedWordRow.language)
        )
        return self._read(
            "count words by language",
            lambda session: {language: int(count) for language, count in session.execute(stmt)},
        )

    def _count_by_media(self) -> MediaStats:
        audio = AnnotatedWordRow.has_audio.is_(True)
        image = AnnotatedWordRow.has_image.is_(True)
        no_audio = AnnotatedWordRow.has_audio.is_(False)
        no_image = AnnotatedWordRow.has_image.is_(False)

        def total(condition):
            return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)

        stmt = select(total(audio), total(image), total(audio & image), total(no_audio & no_image))

        def fetch(session: Session) -> MediaStats:
            with_audio, with_image, with_both, with_none = session.execute(stmt).one()
            return MediaStats(
                with_audio=int(with_audio),
                with_image=int(with_image),
                with_both=int(with_both),
                with_none=int(with_none),
            )

        return self._read("count words by media", fetch)

    def _update(self, word_id: str, changes: Dict[str, Any]) -> AnnotatedWord:
        row_id = _parse_id(word_id)
        if row_id is None:
            raise WordNotFoundError(word_id)

        try:
            with self.session_factory() as session:
                row = session.get(AnnotatedWordRow, row_id)
                if row is None:
                    raise WordNotFoundError(word_id)

                merged = AnnotatedWord.model_validate({**_row_to_model(row).model_dump(), **changes})
                row.word_type = merged.word_type.value
                row.gender = merged.gender.value if merged.gender else None
                row.syllables = list(merged.syllables)
                row.safe_letters = list(merged.safe_letters)
                row.frequency = merged.frequency
                row.has_audio = merged.has_audio
                row.has_image = merged.has_image
                row.prooved_by_therapist = merged.prooved_by_therapist
                row.updated_at = utc_now()

                session.commit()
                session.refresh(row)
                return _row_to_model(row)
        except SQLAlchemyError as e:
            logger.error("repo_write_failed", id=word_id, error=str(e))
            raise RepositoryError(f"Failed to update word: {e}") from e

    def _delete(self, word_id: str) -> bool:
        row_id = _parse_id(word_id)
        if row_id is None:
            return False

        try:
            with self.session_factory() as session:
                row = session.get(AnnotatedWordRow, row_id)
                if row is None:
                    return False
                session.delete(row)
                session.commit()
                return True
        except SQLAlchemyError as e:
            logger.error("repo_write_failed", id=word_id, error=str(e))
            raise RepositoryError(f"Failed to delete word: {e}") from e

    def _ping(self) -> bool:
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False
