"""SQLAlchemy models for tvdetrack database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Float,
    Text,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Platform(Base):
    """Ride-hailing platform model."""

    __tablename__ = "platforms"

    id = Column(String, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    commission_rate = Column(Float, nullable=False, default=0.0)


class Vehicle(Base):
    """Vehicle model."""

    __tablename__ = "vehicles"

    id = Column(String, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    license_plate = Column(String, nullable=False)


class Driver(Base):
    """Driver model."""

    __tablename__ = "drivers"

    id = Column(String, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    region = Column(String, nullable=False)
    entity_type = Column(String, nullable=False)
    irs_rate = Column(Float, nullable=True)
    ss_rate = Column(Float, nullable=True)

    # Relationships
    vehicle_links = relationship(
        "DriverVehicle",
        back_populates="driver",
        cascade="all, delete-orphan",
        order_by="DriverVehicle.position",
    )


class DriverVehicle(Base):
    """Association between a driver and a vehicle.

    vehicle_id is not a foreign key: links to deleted vehicles are kept.
    """

    __tablename__ = "driver_vehicles"

    driver_id = Column(String, ForeignKey("drivers.id"), primary_key=True)
    vehicle_id = Column(String, primary_key=True)
    position = Column(Integer, nullable=False, default=0)

    # Relationships
    driver = relationship("Driver", back_populates="vehicle_links")


class Transaction(Base):
    """Transaction model.

    driver_id, vehicle_id and platform_id are plain references so history
    survives deletion of the referenced entities.
    """

    __tablename__ = "transactions"

    id = Column(String, primary_key=True)
    parent_id = Column(String, nullable=True)
    derived_kind = Column(String, nullable=True)
    date = Column(Date, nullable=False)
    type = Column(String, nullable=False)
    amount = Column(Float, nullable=False)
    description = Column(String, nullable=False, default="")
    driver_id = Column(String, nullable=False)
    vehicle_id = Column(String, nullable=False)
    platform_id = Column(String, nullable=True)
    category = Column(String, nullable=True)
    vat_amount = Column(Float, nullable=True)

    __table_args__ = (
        Index("ix_transactions_parent_id", "parent_id"),
        Index("ix_transactions_date", "date"),
    )


class Backup(Base):
    """Backup model; payload holds the snapshot as JSON."""

    __tablename__ = "backups"

    id = Column(String, primary_key=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    type = Column(String, nullable=False)
    payload = Column(Text, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
