"""
Server-side user context: profile, planner data and recent files for one user.
Built from the database so sync payloads and AI context cannot be tampered with by the client.
"""
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.orm import Session

from edubox.models.file import StoredFile
from edubox.models.planner import Assignment, Course, Event
from edubox.models.user import User


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def get_user_by_clerk_id(db: Session, clerk_id: str) -> User | None:
    return db.query(User).filter(User.clerk_id == clerk_id).first()


def get_user_context(db: Session, user_id: str, now: datetime | None = None) -> dict[str, Any]:
    now = now or datetime.utcnow()
    in_30_days = now + timedelta(days=30)
    in_14_days = now + timedelta(days=14)
    ago_30_days = now - timedelta(days=30)

    user = get_user_by_clerk_id(db, user_id)

    upcoming = (
        db.query(Assignment)
        .filter(Assignment.user_id == user_id, Assignment.due_date >= now, Assignment.due_date <= in_30_days)
        .order_by(Assignment.due_date)
        .limit(20)
        .all()
    )
    overdue = (
        db.query(Assignment)
        .filter(Assignment.user_id == user_id, Assignment.due_date < now, Assignment.status != "completed")
        .order_by(Assignment.due_date)
        .limit(10)
        .all()
    )
    graded = (
        db.query(Assignment)
        .filter(Assignment.user_id == user_id, Assignment.grade.isnot(None), Assignment.status == "completed")
        .order_by(Assignment.created_at.desc())
        .limit(10)
        .all()
    )
    courses = (
        db.query(Course)
        .filter(Course.user_id == user_id, Course.status == "active")
        .limit(20)
        .all()
    )
    events = (
        db.query(Event)
        .filter(Event.user_id == user_id, Event.start_time >= now, Event.start_time <= in_14_days)
        .order_by(Event.start_time)
        .limit(20)
        .all()
    )
    recent_files = (
        db.query(StoredFile)
        .filter(
            StoredFile.user_id == user_id,
            StoredFile.created_at >= ago_30_days,
            StoredFile.is_archived.is_(False),
        )
        .order_by(StoredFile.created_at.desc())
        .limit(15)
        .all()
    )

    weekday = now.strftime("%A").lower()

    def today_slots(course: Course) -> list[dict]:
        return [s for s in (course.schedule or []) if str(s.get("dayOfWeek", "")).lower() == weekday]

    return {
        "user": {
            "name": user.full_name,
            "year": user.year,
            "major": user.major,
            "minor": user.minor,
            "gpa": user.gpa,
            "institution": user.institution,
        } if user else None,
        "assignments": {
            "upcoming": [
                {"title": a.title, "course": a.course_id, "dueDate": _iso(a.due_date),
                 "priority": a.priority, "status": a.status}
                for a in upcoming
            ],
            "overdue": [
                {"title": a.title, "course": a.course_id, "dueDate": _iso(a.due_date), "priority": a.priority}
                for a in overdue
            ],
        },
        "courses": [
            {"code": c.course_code, "name": c.course_name, "instructor": c.instructor,
             "semester": c.semester, "credits": c.credits, "schedule": c.schedule}
            for c in courses
        ],
        "todaySchedule": [
            {"course": c.course_code, "name": c.course_name, "schedule": today_slots(c)}
            for c in courses if today_slots(c)
        ],
        "events": [
            {"title": e.title, "type": e.type, "startTime": _iso(e.start_time), "endTime": _iso(e.end_time),
             "location": e.location, "description": e.description}
            for e in events
        ],
        "recentFiles": [
            {"id": f.id, "storageId": f.storage_id, "name": f.file_name, "url": f.url,
             "category": f.category, "subject": f.subject, "description": f.description,
             "createdAt": _iso(f.created_at)}
            for f in recent_files
        ],
        "performance": {
            "recentGrades": [
                {"assignment": g.title, "course": g.course_id, "grade": g.grade,
                 "maxPoints": g.max_points, "submittedAt": _iso(g.submitted_date)}
                for g in graded
            ],
            "currentGPA": user.gpa if user else None,
        },
        "statistics": {
            "totalCourses": len(courses),
            "upcomingAssignments": len(upcoming),
            "overdueAssignments": len(overdue),
            "upcomingEvents": len(events),
            "recentFiles": len(recent_files),
        },
    }


def get_file_for_user(db: Session, file_id: str, user_id: str) -> StoredFile | None:
    return db.query(StoredFile).filter(StoredFile.id == file_id, StoredFile.user_id == user_id).first()


def set_file_resource_id(db: Session, file_id: str, user_id: str, resource_id: str) -> bool:
    f = get_file_for_user(db, file_id, user_id)
    if not f:
        return False
    f.nuclia_resource_id = resource_id
    db.commit()
    return True


def set_user_resource_id(db: Session, clerk_id: str, resource_id: str) -> bool:
    user = get_user_by_clerk_id(db, clerk_id)
    if not user:
        return False
    user.nuclia_resource_id = resource_id
    db.commit()
    return True
