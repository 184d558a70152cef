import uuid
import enum
from datetime import datetime
from sqlalchemy import Column, String, Float, DateTime
from edubox.database import Base


class UserPlan(str, enum.Enum):
    FREE = "FREE"
    STARTER = "STARTER"
    PRO = "PRO"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    clerk_id = Column(String(64), unique=True, nullable=False, index=True)  # auth provider subject
    email = Column(String(255), nullable=True)
    full_name = Column(String(100), nullable=False, default="")
    year = Column(String(20), nullable=True)
    major = Column(String(100), nullable=True)
    minor = Column(String(100), nullable=True)
    institution = Column(String(255), nullable=True)
    gpa = Column(Float, nullable=True)
    plan = Column(String(20), nullable=False, default=UserPlan.FREE.value)
    nuclia_resource_id = Column(String(128), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
