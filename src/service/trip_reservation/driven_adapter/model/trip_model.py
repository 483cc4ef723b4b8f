from datetime import date, datetime, time
from typing import List, Optional

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Time,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class TripModel(Base):
    __tablename__ = 'trip'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    original_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    stops: Mapped[list] = mapped_column(JSON, nullable=False)
    visibility: Mapped[str] = mapped_column(String(20), default='published', nullable=False)
    vehicle_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    driver_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    segments: Mapped[List['TripSegmentModel']] = relationship(
        'TripSegmentModel',
        back_populates='trip',
        order_by='TripSegmentModel.segment_index',
        cascade='all, delete-orphan',
        lazy='selectin',
    )


class TripSegmentModel(Base):
    """Per-leg seat counter, keyed (record_id, segment_index)"""

    __tablename__ = 'trip_segment'
    __table_args__ = (
        CheckConstraint(
            'available_seats >= 0 AND available_seats <= capacity',
            name='ck_trip_segment_available_seats_range',
        ),
    )

    record_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('trip.id', ondelete='CASCADE'), primary_key=True
    )
    segment_index: Mapped[int] = mapped_column(Integer, primary_key=True)
    origin: Mapped[str] = mapped_column(String(120), nullable=False)
    destination: Mapped[str] = mapped_column(String(120), nullable=False)
    departure_clock: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    departure_day_offset: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    arrival_clock: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    arrival_day_offset: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    available_seats: Mapped[int] = mapped_column(Integer, nullable=False)

    trip: Mapped['TripModel'] = relationship('TripModel', back_populates='segments')
