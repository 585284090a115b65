"""
Booking Transaction Coordinator

Turns confirmed slots into Booking rows:

- single: one slot -> one booking
- dual: shoot slot then edit slot -> two bookings tagged shoot/edit; both
  slots are checked before either is written, and if the edit write still
  fails the shoot booking is cancelled as a compensating action
- sequence: N plan slots -> N bookings in one transaction (all or nothing)

Every insert locks the staff row, re-checks the slot against the working
window, active bookings and approved time off, and only then writes. Weekend
slots and slots outside the window are rejected with InvalidBookingTimeError;
a slot that became taken since it was searched is rejected with
BookingConflictError instead of being double-booked.
"""

from typing import List, Dict, Optional, Sequence, Tuple
from dataclasses import dataclass
from datetime import date, time
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import (
    BookingConflictError,
    BookingWriteError,
    InvalidBookingTimeError,
    InvalidStatusTransitionError,
    NotFoundError,
    SchedulingError,
)
from app.models.availability import Weekday
from app.models.booking import Booking, BookingStatus, BookingType
from app.models.project import Project
from app.models.staff import Staff
from app.services.availability_catalog import AvailabilityCatalog
from app.services.commitment_ledger import CommitmentLedger
from app.services.capacity import Interval, to_minutes

logger = logging.getLogger(__name__)


ALLOWED_STATUS_TRANSITIONS = {
    BookingStatus.SCHEDULED: {BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED},
    BookingStatus.IN_PROGRESS: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}


@dataclass
class SlotChoice:
    """A slot the user confirmed for booking."""
    date: date
    start_time: time
    end_time: time

    @property
    def hours(self) -> float:
        return duration_hours(self.start_time, self.end_time)


def duration_hours(start_time: time, end_time: time) -> float:
    """Hours between two times on the same day (negative if end precedes start)."""
    return (to_minutes(end_time) - to_minutes(start_time)) / 60


class BookingTransactionCoordinator:
    """Writes bookings for confirmed slots."""

    def __init__(self, db: Session):
        self.db = db
        self.catalog = AvailabilityCatalog(db)
        self.ledger = CommitmentLedger(db)

    # ------------------------------------------------------------------
    # Lookups and checks
    # ------------------------------------------------------------------

    def _lock_staff(self, staff_id: int) -> Staff:
        """Lock the staff row so concurrent writers for this staff serialize."""
        staff = self.db.query(Staff).filter(Staff.id == staff_id).with_for_update().first()
        if not staff:
            raise NotFoundError("Staff member not found", {"staff_id": staff_id})
        return staff

    def _get_project(self, project_id: int) -> Project:
        project = self.db.query(Project).filter(Project.id == project_id).first()
        if not project:
            raise NotFoundError("Project not found", {"project_id": project_id})
        return project

    def _get_booking(self, booking_id: int) -> Booking:
        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            raise NotFoundError("Booking not found", {"booking_id": booking_id})
        return booking

    def _validated_hours(self, slot) -> float:
        hours = duration_hours(slot.start_time, slot.end_time)
        if hours <= 0:
            raise InvalidBookingTimeError(
                "End time must be after start time",
                {
                    "start_time": slot.start_time.isoformat(),
                    "end_time": slot.end_time.isoformat()
                }
            )
        return hours

    def window_error(self, staff_id: int, slot) -> Optional[InvalidBookingTimeError]:
        """The reason `slot` lies outside staff_id's working window, or None."""
        slot_details = {
            "date": slot.date.isoformat(),
            "start_time": slot.start_time.isoformat(),
            "end_time": slot.end_time.isoformat()
        }
        if Weekday.from_date(slot.date).is_weekend:
            return InvalidBookingTimeError("Bookings cannot be placed on weekends", slot_details)

        window = self.catalog.get_window(staff_id, slot.date)
        if window is None:
            return InvalidBookingTimeError(
                "Staff member has no availability on this day",
                {"staff_id": staff_id, **slot_details}
            )

        if slot.start_time < window.start_time or slot.end_time > window.end_time:
            return InvalidBookingTimeError(
                f"Slot must fall within working hours "
                f"{window.start_time.strftime('%H:%M')}-{window.end_time.strftime('%H:%M')}",
                {
                    "window_start": window.start_time.isoformat(),
                    "window_end": window.end_time.isoformat(),
                    **slot_details
                }
            )
        return None

    def _verify_slot(self, staff_id: int, slot, pending: Sequence[Booking] = ()) -> None:
        """Raise unless `slot` is inside the window and free. Call with the staff row locked."""
        error = self.window_error(staff_id, slot)
        if error:
            self.db.rollback()
            raise error

        conflicts = self.find_conflicts(staff_id, slot, pending)
        if conflicts:
            self.db.rollback()
            raise BookingConflictError(
                "Selected time overlaps with an existing commitment for this staff member",
                {"conflicts": conflicts}
            )

    def find_conflicts(
        self,
        staff_id: int,
        slot,
        pending: Sequence[Booking] = ()
    ) -> List[Dict]:
        """
        Commitments overlapping `slot` for staff_id.

        `pending` holds bookings added in the same transaction but not yet
        visible to the ledger query.
        """
        start = to_minutes(slot.start_time)
        end = to_minutes(slot.end_time)
        conflicts = []

        existing = list(self.ledger.get_bookings(staff_id, slot.date, slot.date))
        existing.extend(b for b in pending if b.booking_date == slot.date)
        for booking in existing:
            interval = Interval(to_minutes(booking.start_time), to_minutes(booking.end_time))
            if interval.overlaps(start, end):
                conflicts.append({
                    "kind": "booking",
                    "booking_id": booking.id,
                    "date": booking.booking_date.isoformat(),
                    "start_time": booking.start_time.isoformat(),
                    "end_time": booking.end_time.isoformat()
                })

        for entry in self.ledger.get_time_off(staff_id, slot.date, slot.date):
            if entry.is_full_day or entry.start_time is None or entry.end_time is None:
                overlaps = True
            else:
                overlaps = Interval(to_minutes(entry.start_time), to_minutes(entry.end_time)).overlaps(start, end)
            if overlaps:
                conflicts.append({
                    "kind": "time_off",
                    "time_off_id": entry.id,
                    "start_date": entry.start_date.isoformat(),
                    "end_date": entry.end_date.isoformat()
                })

        return conflicts

    def _commit(self, staff_id: int, count: int) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning("Exclusion constraint rejected booking for staff=%s", staff_id)
            raise BookingConflictError(
                "Selected time overlaps with an existing booking for this staff member",
                {"staff_id": staff_id}
            ) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to write %s booking(s) for staff=%s", count, staff_id)
            raise BookingWriteError(
                f"Failed to create {count} booking(s)",
                failed_count=count
            ) from exc

    # ------------------------------------------------------------------
    # Single
    # ------------------------------------------------------------------

    def book_single(
        self,
        project_id: int,
        staff_id: int,
        slot,
        booking_type: Optional[BookingType] = None,
        notes: Optional[str] = None
    ) -> Booking:
        """Check-and-insert one scheduled booking for a confirmed slot."""
        hours = self._validated_hours(slot)
        self._get_project(project_id)
        self._lock_staff(staff_id)
        self._verify_slot(staff_id, slot)
        return self._insert(project_id, staff_id, slot, hours, booking_type, notes)

    def _insert(
        self,
        project_id: int,
        staff_id: int,
        slot,
        hours: float,
        booking_type: Optional[BookingType] = None,
        notes: Optional[str] = None
    ) -> Booking:
        booking = Booking(
            project_id=project_id,
            staff_id=staff_id,
            booking_date=slot.date,
            start_time=slot.start_time,
            end_time=slot.end_time,
            hours_booked=hours,
            status=BookingStatus.SCHEDULED,
            type=booking_type,
            notes=notes
        )
        self.db.add(booking)
        self._commit(staff_id, 1)
        self.db.refresh(booking)

        logger.info(
            "Booked project=%s staff=%s %s %s-%s (%sh)",
            project_id, staff_id, slot.date, slot.start_time, slot.end_time, hours
        )
        return booking

    # ------------------------------------------------------------------
    # Dual (shoot + edit)
    # ------------------------------------------------------------------

    def book_dual(
        self,
        project_id: int,
        staff_id: int,
        shoot_slot,
        edit_slot
    ) -> Tuple[Booking, Booking]:
        """
        Write the shoot booking, then the edit booking.

        Both slots are checked under the staff lock before anything is
        written, so an unavailable edit slot leaves no shoot booking behind.
        If the edit write itself still fails, the already-committed shoot
        booking is cancelled. When that compensation fails too, the raised
        error lists the shoot booking in written_ids for manual reconciliation.
        """
        shoot_hours = self._validated_hours(shoot_slot)
        self._validated_hours(edit_slot)
        if shoot_slot.date == edit_slot.date and Interval(
            to_minutes(shoot_slot.start_time), to_minutes(shoot_slot.end_time)
        ).overlaps(to_minutes(edit_slot.start_time), to_minutes(edit_slot.end_time)):
            raise BookingConflictError(
                "Shoot and edit slots overlap",
                {"date": shoot_slot.date.isoformat()}
            )

        self._get_project(project_id)
        self._lock_staff(staff_id)
        self._verify_slot(staff_id, shoot_slot)
        self._verify_slot(staff_id, edit_slot)

        shoot = self._insert(project_id, staff_id, shoot_slot, shoot_hours, BookingType.SHOOT)

        try:
            edit = self.book_single(project_id, staff_id, edit_slot, BookingType.EDIT)
        except SchedulingError as exc:
            logger.warning(
                "Edit booking failed for project=%s; cancelling shoot booking %s",
                project_id, shoot.id
            )
            self._compensate_shoot(shoot, exc)
            raise BookingWriteError(
                f"Failed to create edit booking; shoot booking {shoot.id} was cancelled",
                failed_count=1,
                details={"cause": exc.to_dict(), "cancelled_booking_id": shoot.id}
            ) from exc

        return shoot, edit

    def _compensate_shoot(self, shoot: Booking, cause: SchedulingError) -> None:
        try:
            shoot.status = BookingStatus.CANCELLED
            shoot.notes = "Cancelled: paired edit booking could not be created"
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Compensation failed; shoot booking %s is orphaned", shoot.id)
            raise BookingWriteError(
                f"Failed to create edit booking and could not cancel shoot booking {shoot.id}; "
                f"manual reconciliation required",
                failed_count=1,
                written_ids=[shoot.id],
                details={"cause": cause.to_dict(), "requires_manual_reconciliation": True}
            ) from exc

    # ------------------------------------------------------------------
    # Multi-day sequence
    # ------------------------------------------------------------------

    def book_sequence(self, project_id: int, staff_id: int, slots: Sequence) -> List[Booking]:
        """
        Write one booking per plan slot in a single transaction.

        Every slot is checked before anything is written; if any slot fails
        nothing is persisted and BookingWriteError reports how many failed.
        """
        if not slots:
            raise InvalidBookingTimeError("A multi-day booking needs at least one slot")

        self._get_project(project_id)
        self._lock_staff(staff_id)

        total = len(slots)
        pending: List[Booking] = []
        failures = []

        for index, slot in enumerate(slots, start=1):
            try:
                hours = self._validated_hours(slot)
            except InvalidBookingTimeError as exc:
                failures.append({"sequence": index, "date": slot.date.isoformat(), **exc.to_dict()})
                continue

            error = self.window_error(staff_id, slot)
            if error:
                failures.append({"sequence": index, **error.to_dict()})
                continue

            conflicts = self.find_conflicts(staff_id, slot, pending)
            if conflicts:
                failures.append({
                    "sequence": index,
                    "date": slot.date.isoformat(),
                    "message": "Slot overlaps an existing commitment",
                    "conflicts": conflicts
                })
                continue

            pending.append(Booking(
                project_id=project_id,
                staff_id=staff_id,
                booking_date=slot.date,
                start_time=slot.start_time,
                end_time=slot.end_time,
                hours_booked=hours,
                status=BookingStatus.SCHEDULED,
                notes=f"Multi-day booking sequence {index} of {total}",
                sequence_index=index,
                sequence_total=total
            ))

        if failures:
            self.db.rollback()
            logger.warning(
                "Multi-day booking rejected for project=%s staff=%s: %s of %s slots failed",
                project_id, staff_id, len(failures), total
            )
            raise BookingWriteError(
                f"Failed to create {len(failures)} bookings",
                failed_count=len(failures),
                details={"failures": failures}
            )

        self.db.add_all(pending)
        self._commit(staff_id, total)
        for booking in pending:
            self.db.refresh(booking)

        logger.info("Created %s bookings across multiple days for project=%s", total, project_id)
        return pending

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def reassign(
        self,
        booking_id: int,
        staff_id: Optional[int] = None,
        booking_date: Optional[date] = None,
        start_time: Optional[time] = None,
        end_time: Optional[time] = None
    ) -> Booking:
        """
        Move a booking to another staff member and/or time.

        Duration is recomputed from the new start/end. Capacity is not
        re-checked here; run a slot search for the new staff/date first.
        """
        booking = self._get_booking(booking_id)

        new_staff_id = staff_id if staff_id is not None else booking.staff_id
        new_start = start_time or booking.start_time
        new_end = end_time or booking.end_time
        hours = self._validated_hours(SlotChoice(booking.booking_date, new_start, new_end))

        if new_staff_id != booking.staff_id:
            if not self.db.query(Staff).filter(Staff.id == new_staff_id).first():
                raise NotFoundError("Staff member not found", {"staff_id": new_staff_id})
            project = self.db.query(Project).filter(Project.id == booking.project_id).first()
            if project and project.assigned_staff_id != new_staff_id:
                project.assigned_staff_id = new_staff_id

        booking.staff_id = new_staff_id
        if booking_date is not None:
            booking.booking_date = booking_date
        booking.start_time = new_start
        booking.end_time = new_end
        booking.hours_booked = hours

        self._commit(new_staff_id, 1)
        self.db.refresh(booking)
        logger.info("Reassigned booking %s to staff=%s", booking_id, new_staff_id)
        return booking

    def update_status(self, booking_id: int, status: BookingStatus) -> Booking:
        """Apply a status transition (scheduled -> in_progress -> completed, or cancel)."""
        booking = self._get_booking(booking_id)
        current = BookingStatus(booking.status)

        if status not in ALLOWED_STATUS_TRANSITIONS[current]:
            raise InvalidStatusTransitionError(
                f"Cannot change booking status from {current.value} to {status.value}",
                {"booking_id": booking_id, "current": current.value, "requested": status.value}
            )

        booking.status = status
        self._commit(booking.staff_id, 1)
        self.db.refresh(booking)
        return booking
