import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.api.routes import staff, availability, time_off, projects, bookings, capacity

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.app_name,
    description="API for staff booking and capacity scheduling",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(staff.router, prefix="/api/staff", tags=["Staff"])
app.include_router(availability.router, prefix="/api/availability", tags=["Availability"])
app.include_router(time_off.router, prefix="/api/time-off", tags=["Time Off"])
app.include_router(projects.router, prefix="/api/projects", tags=["Projects"])
app.include_router(bookings.router, prefix="/api/bookings", tags=["Bookings"])
app.include_router(capacity.router, prefix="/api/capacity", tags=["Capacity"])


@app.get("/")
async def root():
    return {"message": "Studio Booking Scheduler API", "version": "1.0.0"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
