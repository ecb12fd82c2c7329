from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, Text, text

from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Facilities(Base):
    __tablename__ = 'facilities'

    name = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    operating_window = Column(Text, nullable=False, server_default=text("'09:00-21:00'"))
    slot_minutes = Column(Integer)
    capacity = Column(Integer)
    enabled = Column(Integer, nullable=False, server_default=text('1'))

    bookings = relationship('Bookings', back_populates='facility')


class Bookings(Base):
    __tablename__ = 'bookings'
    __table_args__ = (
        CheckConstraint('party_count > 0', name='ck_bookings_party_count_positive'),
        CheckConstraint('ends_at > starts_at', name='ck_bookings_positive_duration'),
        CheckConstraint("status IN ('confirmed', 'cancelled')", name='ck_bookings_status'),
        Index('ix_bookings_facility_slot', 'facility_id', 'starts_at', 'ends_at'),
        Index('ix_bookings_user_day', 'user_id', 'starts_at'),
    )

    facility_id = Column(ForeignKey('facilities.id', ondelete='CASCADE'), nullable=False)
    user_id = Column(Text, nullable=False)
    starts_at = Column(DateTime, nullable=False)
    ends_at = Column(DateTime, nullable=False)
    party_count = Column(Integer, nullable=False, server_default=text('1'))
    status = Column(Text, nullable=False, server_default=text("'confirmed'"))
    created_at = Column(DateTime, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    id = Column(Integer, primary_key=True)
    note = Column(Text)
    cancelled_at = Column(DateTime)
    cancelled_by = Column(Text)

    facility = relationship('Facilities', back_populates='bookings')
