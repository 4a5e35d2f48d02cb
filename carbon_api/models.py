# carbon_api/models.py
from sqlalchemy import Column, String, Integer, Float, DateTime, Text
from datetime import datetime
from .database import Base


class EmissionFactorRow(Base):
    __tablename__ = "emission_factors"
    id = Column(Integer, primary_key=True, autoincrement=True)
    activity = Column(String(100), nullable=False, index=True)
    mode = Column("transport_mode", String(50), nullable=True)
    factor = Column(Float, nullable=False)
    unit = Column(String(50), nullable=False)
    source = Column(String(100))
    created_at = Column(DateTime, default=datetime.utcnow)


class Calculation(Base):
    __tablename__ = "calculations"
    id = Column(Integer, primary_key=True, autoincrement=True)
    activity = Column(String(100), nullable=False)
    input_data = Column(Text, nullable=False)  # JSON string of the request
    carbon_footprint = Column(Float, nullable=False)
    unit = Column(String(20), nullable=False)
    user_id = Column(String(100))
    created_at = Column(DateTime, default=datetime.utcnow)


class ApiUsage(Base):
    __tablename__ = "api_usage"
    id = Column(Integer, primary_key=True, autoincrement=True)
    endpoint = Column(String(100), nullable=False)
    user_id = Column(String(100))
    response_time_ms = Column(Integer)
    created_at = Column(DateTime, default=datetime.utcnow)
