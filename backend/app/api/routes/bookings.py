"""
Booking API endpoints.

Search and plan endpoints never write; bookings are only created by the
confirm endpoints after the user picked a slot or accepted a plan.
"""

from typing import Dict, Any, List, Optional
from datetime import date
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import SchedulingError
from app.api.errors import to_http_exception
from app.models.booking import Booking
from app.schemas.booking import (
    SlotSearchRequest, MultiDayPlanRequest,
    SingleBookingCreate, DualBookingCreate, MultiDayBookingCreate,
    BookingReassign, BookingStatusUpdate, BookingResponse,
)
from app.services.slot_finder import SingleDaySlotFinder
from app.services.multi_day_allocator import MultiDayAllocator
from app.services.booking_coordinator import BookingTransactionCoordinator, SlotChoice

router = APIRouter()


def _choice(selection) -> SlotChoice:
    return SlotChoice(date=selection.date, start_time=selection.start_time, end_time=selection.end_time)


@router.get("/", response_model=List[BookingResponse])
async def list_bookings(
    staff_id: Optional[int] = None,
    project_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """List bookings. Can filter by staff, project and date range."""
    query = db.query(Booking)
    if staff_id:
        query = query.filter(Booking.staff_id == staff_id)
    if project_id:
        query = query.filter(Booking.project_id == project_id)
    if start_date:
        query = query.filter(Booking.booking_date >= start_date)
    if end_date:
        query = query.filter(Booking.booking_date <= end_date)
    return query.order_by(Booking.booking_date, Booking.start_time).offset(skip).limit(limit).all()


@router.post("/slots")
async def search_slots(
    request: SlotSearchRequest,
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    List every slot of the requested length on one date.

    Capacity problems come back as warnings alongside an empty slot list.
    """
    finder = SingleDaySlotFinder(db)
    result = finder.find_slots(request.staff_id, request.date, request.hours)
    return result.to_dict()


@router.post("/multi-day/plan")
async def plan_multi_day(
    request: MultiDayPlanRequest,
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """Spread the requested hours over the coming weekdays (preview only)."""
    allocator = MultiDayAllocator(
        db,
        lookahead_days=request.lookahead_days,
        min_daily_hours=request.min_daily_hours
    )
    plan = allocator.allocate(
        request.staff_id,
        request.hours,
        request.reference_date or date.today()
    )
    return plan.to_dict()


@router.post("/", response_model=BookingResponse, status_code=201)
async def create_booking(
    booking_data: SingleBookingCreate,
    db: Session = Depends(get_db)
):
    """Book one confirmed slot."""
    coordinator = BookingTransactionCoordinator(db)
    try:
        return coordinator.book_single(
            booking_data.project_id,
            booking_data.staff_id,
            _choice(booking_data.slot),
            booking_type=booking_data.type,
            notes=booking_data.notes
        )
    except SchedulingError as exc:
        raise to_http_exception(exc)


@router.post("/dual", response_model=List[BookingResponse], status_code=201)
async def create_dual_booking(
    booking_data: DualBookingCreate,
    db: Session = Depends(get_db)
):
    """Book the confirmed shoot slot, then the confirmed edit slot."""
    coordinator = BookingTransactionCoordinator(db)
    try:
        shoot, edit = coordinator.book_dual(
            booking_data.project_id,
            booking_data.staff_id,
            _choice(booking_data.shoot_slot),
            _choice(booking_data.edit_slot)
        )
    except SchedulingError as exc:
        raise to_http_exception(exc)
    return [shoot, edit]


@router.post("/multi-day", response_model=List[BookingResponse], status_code=201)
async def create_multi_day_booking(
    booking_data: MultiDayBookingCreate,
    db: Session = Depends(get_db)
):
    """Book every slot of an accepted multi-day plan (all or nothing)."""
    coordinator = BookingTransactionCoordinator(db)
    try:
        return coordinator.book_sequence(
            booking_data.project_id,
            booking_data.staff_id,
            [_choice(s) for s in booking_data.slots]
        )
    except SchedulingError as exc:
        raise to_http_exception(exc)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(booking_id: int, db: Session = Depends(get_db)):
    """Get a specific booking by ID."""
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


@router.patch("/{booking_id}/reassign", response_model=BookingResponse)
async def reassign_booking(
    booking_id: int,
    reassign_data: BookingReassign,
    db: Session = Depends(get_db)
):
    """
    Move a booking to another staff member, date or time.

    Capacity is not re-checked; search slots for the new staff/date first.
    """
    coordinator = BookingTransactionCoordinator(db)
    try:
        return coordinator.reassign(booking_id, **reassign_data.model_dump(exclude_unset=True))
    except SchedulingError as exc:
        raise to_http_exception(exc)


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: int,
    status_data: BookingStatusUpdate,
    db: Session = Depends(get_db)
):
    """Move a booking through scheduled -> in_progress -> completed, or cancel it."""
    coordinator = BookingTransactionCoordinator(db)
    try:
        return coordinator.update_status(booking_id, status_data.status)
    except SchedulingError as exc:
        raise to_http_exception(exc)
