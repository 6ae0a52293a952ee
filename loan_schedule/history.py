"""Persistence layer for the calculation history.

Saved calculations keep the three inputs together with the full engine result
so they can be shown again later without recomputing. The store defaults to
SQLite for local use, but accepts any SQLAlchemy-compatible URL.

Only the newest ``max_items`` calculations are kept. Items are returned newest
first.
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from typing import Iterable, List, Optional
from uuid import uuid4

from sqlalchemy import Column, Float, Integer, String, Text, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import DEFAULT_DATABASE_URL, DEFAULT_HISTORY_LIMIT
from .data_models import HistoryItem, LoanInput, LoanSummary
from .exceptions import HistoryStorageError

logger = logging.getLogger(__name__)


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


Base = declarative_base()


class CalculationModel(Base):
    __tablename__ = "loan_calculations"

    id = Column(String(64), primary_key=True)
    created_at = Column(String(40), nullable=False)
    # insertion order; ids and timestamps can tie within one millisecond
    sequence = Column(Integer, index=True, nullable=False)
    principal = Column(Float, nullable=False)
    annual_rate_percent = Column(Float, nullable=False)
    term_months = Column(Integer, nullable=False)
    result_json = Column(Text, nullable=False)


class HistoryStore:
    """Database-backed calculation history."""

    def __init__(self, url: str, *, max_items: int = DEFAULT_HISTORY_LIMIT) -> None:
        engine_kwargs = {"future": True}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise every session sees an empty database
            engine_kwargs.update(
                connect_args={"check_same_thread": False}, poolclass=StaticPool
            )
        self._engine = create_engine(url, **engine_kwargs)
        Base.metadata.create_all(self._engine)
        self._session_factory = sessionmaker(self._engine, expire_on_commit=False, future=True)
        self._max_items = max_items

    def save_calculation(self, loan: LoanInput, result: LoanSummary) -> HistoryItem:
        """Store a calculation and return the saved item."""
        try:
            with self._session_factory() as session:
                item_id = str(_timestamp_ms())
                if session.get(CalculationModel, item_id) is not None:
                    item_id = f"{item_id}-{uuid4().hex[:8]}"
                row = CalculationModel(
                    id=item_id,
                    created_at=datetime.now(timezone.utc).isoformat(),
                    sequence=self._next_sequence(session),
                    principal=loan.principal,
                    annual_rate_percent=loan.annual_rate_percent,
                    term_months=loan.term_months,
                    result_json=json.dumps(result.to_dict()),
                )
                session.add(row)
                session.flush()
                self._trim(session)
                session.commit()
                item = self._to_item(row)
        except SQLAlchemyError as exc:
            logger.error("Saving calculation failed", exc_info=True)
            raise HistoryStorageError("Saving the calculation failed") from exc
        logger.info("Saved calculation %s", item.id)
        return item

    def get_history(self) -> List[HistoryItem]:
        try:
            with self._session_factory() as session:
                rows: Iterable[CalculationModel] = session.execute(
                    select(CalculationModel).order_by(CalculationModel.sequence.desc())
                ).scalars()
                return [self._to_item(row) for row in rows]
        except SQLAlchemyError as exc:
            logger.error("Loading history failed", exc_info=True)
            raise HistoryStorageError("Loading the history failed") from exc

    def get_item(self, item_id: str) -> Optional[HistoryItem]:
        try:
            with self._session_factory() as session:
                row = session.get(CalculationModel, item_id)
                return self._to_item(row) if row else None
        except SQLAlchemyError as exc:
            logger.error("Loading history item %s failed", item_id, exc_info=True)
            raise HistoryStorageError("Loading the history item failed") from exc

    def delete_item(self, item_id: str) -> bool:
        """Delete one calculation. Returns ``False`` if it did not exist."""
        try:
            with self._session_factory() as session:
                row = session.get(CalculationModel, item_id)
                if row is None:
                    return False
                session.delete(row)
                session.commit()
        except SQLAlchemyError as exc:
            logger.error("Deleting history item %s failed", item_id, exc_info=True)
            raise HistoryStorageError("Deleting the history item failed") from exc
        logger.info("Deleted calculation %s", item_id)
        return True

    def clear_history(self) -> None:
        try:
            with self._session_factory() as session:
                session.execute(CalculationModel.__table__.delete())
                session.commit()
        except SQLAlchemyError as exc:
            logger.error("Clearing history failed", exc_info=True)
            raise HistoryStorageError("Clearing the history failed") from exc
        logger.info("Cleared calculation history")

    def _trim(self, session) -> None:
        """Delete rows beyond the newest ``max_items`` in the caller's transaction."""
        if not self._max_items or self._max_items < 0:
            return
        stale = session.execute(
            select(CalculationModel)
            .order_by(CalculationModel.sequence.desc())
            .offset(self._max_items)
        ).scalars().all()
        for row in stale:
            session.delete(row)

    @staticmethod
    def _next_sequence(session) -> int:
        last = session.execute(
            select(CalculationModel.sequence).order_by(CalculationModel.sequence.desc()).limit(1)
        ).scalar()
        return (last or 0) + 1

    @staticmethod
    def _to_item(row: CalculationModel) -> HistoryItem:
        return HistoryItem(
            id=row.id,
            created_at=row.created_at,
            principal=row.principal,
            annual_rate_percent=row.annual_rate_percent,
            term_months=row.term_months,
            result=LoanSummary.from_dict(json.loads(row.result_json)),
        )


def create_store_from_env(url: Optional[str], max_items: int = DEFAULT_HISTORY_LIMIT) -> HistoryStore:
    return HistoryStore(url or DEFAULT_DATABASE_URL, max_items=max_items)
