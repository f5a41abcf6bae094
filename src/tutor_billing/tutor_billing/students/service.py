from __future__ import annotations

import uuid
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..billing.service import BillingService
from ..common.datetime_utils import now_local, week_anchor, weekday_of
from ..common.validators import optional_hhmm, parse_weekdays, require_non_empty, require_non_negative, to_money
from ..core.enums import Weekday
from ..core.exceptions import NotFoundError, ValidationError
from .model import Student, StudentProfile
from .repository import StudentRepository


def build_profile(
    *,
    name: str,
    hourly_rate,
    scheduled_days: Iterable[str] = (),
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
    image_url: Optional[str] = None,
) -> StudentProfile:
    """Validate raw input into a StudentProfile."""

    start = optional_hhmm(start_time, "Start time")
    end = optional_hhmm(end_time, "End time")
    if start and end and start >= end:
        raise ValidationError("Start time must be before end time")

    return StudentProfile(
        name=require_non_empty(name, "Name"),
        hourly_rate=require_non_negative(hourly_rate, "Hourly rate"),
        scheduled_days=parse_weekdays(scheduled_days),
        start_time=start,
        end_time=end,
        image_url=(image_url or "").strip() or None,
    )


class StudentService:
    """Use case: manage students. Every read passes through the billing rollover."""

    def __init__(self, students: StudentRepository, billing: BillingService):
        self._students = students
        self._billing = billing

    def list_students(
        self,
        *,
        now: Optional[datetime] = None,
        search: Optional[str] = None,
        day: Optional[Weekday | str] = None,
        min_rate=None,
    ) -> list[Student]:
        now = now_local(now)
        items = [self._billing.ensure_current(s, now=now) for s in self._students.list_all()]

        if search and search.strip():
            needle = search.strip().lower()
            items = [s for s in items if needle in s.name.lower()]
        if day:
            wanted = parse_weekdays([day])[0]
            items = [s for s in items if s.is_scheduled(wanted)]
        if min_rate is not None and str(min_rate).strip():
            floor = to_money(min_rate)
            items = [s for s in items if s.hourly_rate > floor]
        return items

    def get_student(self, student_id: str, *, now: Optional[datetime] = None) -> Student:
        return self._billing.read_student(student_id, now=now)

    def create_student(self, profile: StudentProfile, *, now: Optional[datetime] = None) -> Student:
        now = now_local(now)
        profile = build_profile(
            name=profile.name,
            hourly_rate=profile.hourly_rate,
            scheduled_days=profile.scheduled_days,
            start_time=profile.start_time,
            end_time=profile.end_time,
            image_url=profile.image_url,
        )
        student = Student(
            student_id=str(uuid.uuid4()),
            name=profile.name,
            hourly_rate=profile.hourly_rate,
            scheduled_days=profile.scheduled_days,
            start_time=profile.start_time,
            end_time=profile.end_time,
            image_url=profile.image_url,
            cycle_anchor=week_anchor(now),
            created_at=now,
        )
        return self._students.create(student)

    def update_profile(self, student_id: str, profile: StudentProfile, *, now: Optional[datetime] = None) -> Student:
        """Edit name, rate, schedule and display fields. Financial state is untouched."""

        profile = build_profile(
            name=profile.name,
            hourly_rate=profile.hourly_rate,
            scheduled_days=profile.scheduled_days,
            start_time=profile.start_time,
            end_time=profile.end_time,
            image_url=profile.image_url,
        )
        # close a stale week at the terms it was attended under
        self._billing.read_student(student_id, now=now)
        if not self._students.update_profile(student_id, profile):
            raise NotFoundError(f"Student {student_id} not found")
        return self.get_student(student_id, now=now)

    def delete_student(self, student_id: str) -> None:
        if not self._students.delete_by_id(student_id):
            raise NotFoundError(f"Student {student_id} not found")

    def todays_classes(self, *, now: Optional[datetime] = None) -> Sequence[Student]:
        """Students scheduled on today's weekday, by start time (untimed last), then name."""

        now = now_local(now)
        today = weekday_of(now.date())
        todays = [s for s in self.list_students(now=now) if s.is_scheduled(today)]
        todays.sort(key=lambda s: (s.start_time is None, s.start_time or "", s.name.lower()))
        return todays

