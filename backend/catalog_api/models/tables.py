from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Text,
    Time,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Company(Base):
    __tablename__ = 'company'

    name = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    created_at = Column(DateTime, server_default=func.now())

    delivery_settings = relationship('DeliverySettings', back_populates='company', uselist=False)


class DeliverySettings(Base):
    __tablename__ = 'delivery_settings'

    company_id = Column(ForeignKey('company.id', ondelete='CASCADE'), nullable=False, unique=True)
    id = Column(Integer, primary_key=True)
    min_slots_ahead = Column(Integer, nullable=False, server_default=text('2'))
    max_capacity_morning = Column(Integer, nullable=False, server_default=text('10'))
    max_capacity_afternoon = Column(Integer, nullable=False, server_default=text('10'))
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    company = relationship('Company', back_populates='delivery_settings')
    weekdays = relationship(
        'DeliveryWeekday',
        back_populates='settings',
        cascade='all, delete-orphan',
        order_by='DeliveryWeekday.weekday',
    )

    __table_args__ = (
        CheckConstraint('min_slots_ahead >= 0', name='ck_delivery_settings_min_slots'),
        CheckConstraint('max_capacity_morning >= 0', name='ck_delivery_settings_cap_morning'),
        CheckConstraint('max_capacity_afternoon >= 0', name='ck_delivery_settings_cap_afternoon'),
    )


class DeliveryWeekday(Base):
    __tablename__ = 'delivery_weekdays'

    settings_id = Column(ForeignKey('delivery_settings.id', ondelete='CASCADE'), nullable=False)
    weekday = Column(Integer, nullable=False)  # 0 = Monday, 6 = Sunday
    id = Column(Integer, primary_key=True)
    enabled = Column(Boolean, nullable=False, server_default=text('0'))
    morning_start = Column(Time)
    morning_end = Column(Time)
    afternoon_start = Column(Time)
    afternoon_end = Column(Time)

    settings = relationship('DeliverySettings', back_populates='weekdays')

    __table_args__ = (
        UniqueConstraint('settings_id', 'weekday', name='uq_delivery_weekdays_settings_weekday'),
        CheckConstraint('weekday BETWEEN 0 AND 6', name='ck_delivery_weekdays_weekday'),
    )


class DeliverySchedule(Base):
    """Specific-date override of the weekly settings."""
    __tablename__ = 'delivery_schedules'

    company_id = Column(ForeignKey('company.id', ondelete='CASCADE'), nullable=False)
    date = Column(Date, nullable=False)
    id = Column(Integer, primary_key=True)
    morning_enabled = Column(Boolean, nullable=False, server_default=text('1'))
    afternoon_enabled = Column(Boolean, nullable=False, server_default=text('1'))
    custom_max_capacity_morning = Column(Integer)
    custom_max_capacity_afternoon = Column(Integer)
    custom_morning_start = Column(Time)
    custom_morning_end = Column(Time)
    custom_afternoon_start = Column(Time)
    custom_afternoon_end = Column(Time)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint('company_id', 'date', name='uq_delivery_schedules_company_date'),
    )


class DeliverySlot(Base):
    """Booking counter for one (company, date, half-day). No capacity column on purpose."""
    __tablename__ = 'delivery_slots'

    company_id = Column(ForeignKey('company.id', ondelete='CASCADE'), nullable=False)
    date = Column(Date, nullable=False)
    slot_type = Column(Text, nullable=False)  # "morning" / "afternoon"
    id = Column(Integer, primary_key=True)
    current_count = Column(Integer, nullable=False, server_default=text('0'))
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint('company_id', 'date', 'slot_type', name='uq_delivery_slots_company_date_type'),
        CheckConstraint('current_count >= 0', name='ck_delivery_slots_count'),
    )
