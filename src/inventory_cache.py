"""
Persistent TTL cache for fetched SkyBlock member profiles.

One row per (player_uuid, profile_uuid). Expiry is only checked when a row
is read: an expired row is deleted by the read that finds it and reported
as a miss. Nothing sweeps the table in the background.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Optional

from sqlalchemy import Column, Integer, String, Text, create_engine
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

DEFAULT_TTL = 60 * 60  # seconds

Base = declarative_base()


class CacheEntry(Base):
    """Serialized member profile with its absolute expiration (epoch milliseconds)."""

    __tablename__ = "inventory_cache"

    player_uuid = Column(String(64), primary_key=True)
    profile_uuid = Column(String(64), primary_key=True)
    expiration = Column(Integer, nullable=False)
    data = Column(Text, nullable=False)

    def __repr__(self):
        return f"<CacheEntry(player={self.player_uuid}, profile={self.profile_uuid}, expiration={self.expiration})>"


class InventoryCache:
    """Stores serialized profiles keyed by (player, profile) with lazy expiration."""

    def __init__(self, db_path: str, default_ttl: float = DEFAULT_TTL,
                 clock: Callable[[], float] = time.time):
        self.logger = logging.getLogger(__name__)
        self.db_path = db_path
        self.default_ttl = default_ttl
        self._clock = clock
        self.engine = None
        self.SessionLocal = None

    def initialize(self):
        """Create the engine and the cache table. Call once at startup."""
        try:
            if self.db_path == ":memory:":
                self.engine = create_engine(
                    "sqlite://",
                    connect_args={"check_same_thread": False},
                    poolclass=StaticPool,
                )
            else:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
                self.engine = create_engine(
                    f"sqlite:///{self.db_path}",
                    pool_pre_ping=True,
                    connect_args={"check_same_thread": False},
                )
            self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
            Base.metadata.create_all(bind=self.engine)
            self.logger.info("[Cache] Initialized inventory cache at %s", self.db_path)
        except SQLAlchemyError as e:
            self.logger.error("[Cache] Failed to initialize cache: %s", e)
            raise

    def close(self):
        if self.engine is not None:
            self.engine.dispose()

    def _session(self) -> Session:
        if not self.SessionLocal:
            raise RuntimeError("Cache not initialized. Call initialize() first.")
        return self.SessionLocal()

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def insert(self, player_uuid: str, profile_uuid: str, data: str, ttl: Optional[float] = None):
        """Store `data`, replacing any existing entry for the key. `ttl` is in seconds."""
        ttl = self.default_ttl if ttl is None else ttl
        expiration = self._now_ms() + int(ttl * 1000)

        stmt = sqlite_insert(CacheEntry).values(
            player_uuid=player_uuid,
            profile_uuid=profile_uuid,
            expiration=expiration,
            data=data,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[CacheEntry.player_uuid, CacheEntry.profile_uuid],
            set_={"expiration": expiration, "data": data},
        )

        session = self._session()
        try:
            session.execute(stmt)
            session.commit()
            self.logger.debug("[Cache] Stored %s/%s for %.0fs", player_uuid, profile_uuid, ttl)
        except SQLAlchemyError as e:
            session.rollback()
            self.logger.error("[Cache] Failed to store %s/%s: %s", player_uuid, profile_uuid, e)
            raise
        finally:
            session.close()

    def get(self, player_uuid: str, profile_uuid: str) -> Optional[str]:
        """Return the cached payload, or None if missing or expired (expired rows are deleted)."""
        session = self._session()
        try:
            entry = session.get(CacheEntry, (player_uuid, profile_uuid))
            if entry is None:
                return None

            if entry.expiration < self._now_ms():
                session.delete(entry)
                session.commit()
                self.logger.debug("[Cache] Evicted expired entry %s/%s", player_uuid, profile_uuid)
                return None

            return entry.data
        except SQLAlchemyError as e:
            session.rollback()
            self.logger.error("[Cache] Failed to read %s/%s: %s", player_uuid, profile_uuid, e)
            raise
        finally:
            session.close()

    def delete(self, player_uuid: str, profile_uuid: str) -> bool:
        session = self._session()
        try:
            deleted = session.query(CacheEntry).filter(
                CacheEntry.player_uuid == player_uuid,
                CacheEntry.profile_uuid == profile_uuid,
            ).delete()
            session.commit()
            return deleted > 0
        except SQLAlchemyError as e:
            session.rollback()
            self.logger.error("[Cache] Failed to delete %s/%s: %s", player_uuid, profile_uuid, e)
            raise
        finally:
            session.close()
