"""Courses, assignments and calendar events (planner data read for the user context)."""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Float, Text, DateTime, JSON
from edubox.database import Base


class Course(Base):
    __tablename__ = "courses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False, index=True)
    course_code = Column(String(32), nullable=False)
    course_name = Column(String(255), nullable=False)
    instructor = Column(String(255), nullable=True)
    semester = Column(String(64), nullable=True)
    credits = Column(Integer, nullable=True)
    status = Column(String(16), nullable=False, default="active")  # "active" | "completed" | "dropped"
    # [{"dayOfWeek": "Monday", "startTime": "09:00", "endTime": "10:30", "location": "..."}]
    schedule = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False, index=True)
    course_id = Column(String(36), nullable=True)
    title = Column(String(255), nullable=False)
    due_date = Column(DateTime, nullable=False, index=True)
    priority = Column(String(16), nullable=False, default="medium")
    status = Column(String(16), nullable=False, default="pending")  # "pending" | "in_progress" | "completed"
    grade = Column(Float, nullable=True)
    max_points = Column(Float, nullable=True)
    submitted_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    type = Column(String(32), nullable=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=True)
    location = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
