"""Database utilities and ORM models."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional

from sqlalchemy import BigInteger, DateTime, Float, ForeignKey, Integer, String, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship, sessionmaker


class Base(DeclarativeBase):
    pass


class Campaign(Base):
    """One direction's series of rounds from a single speed test run."""

    __tablename__ = "campaigns"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    server: Mapped[str] = mapped_column(String(256))
    direction: Mapped[str] = mapped_column(String(16), index=True)
    rounds: Mapped[int] = mapped_column(Integer)
    parallelism: Mapped[int] = mapped_column(Integer)
    payload_size_bytes: Mapped[int] = mapped_column(BigInteger)
    average_mbps: Mapped[Optional[float]] = mapped_column(Float)
    median_mbps: Mapped[Optional[float]] = mapped_column(Float)

    samples: Mapped[List["Sample"]] = relationship(
        back_populates="campaign",
        cascade="all, delete-orphan",
        order_by="Sample.round_index",
        lazy="selectin",
    )


class Sample(Base):
    __tablename__ = "samples"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    campaign_id: Mapped[int] = mapped_column(ForeignKey("campaigns.id"), index=True)
    round_index: Mapped[int] = mapped_column(Integer)
    # NULL when the round produced a non-finite figure
    mbps: Mapped[Optional[float]] = mapped_column(Float)

    campaign: Mapped[Campaign] = relationship(back_populates="samples")


def init_db(data_dir: Path) -> sessionmaker:
    db_path = data_dir / "metrics.db"
    engine = create_engine(f"sqlite:///{db_path}", future=True)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, future=True, expire_on_commit=False)


@contextmanager
def get_session(Session: sessionmaker) -> Iterator:
    session = Session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
