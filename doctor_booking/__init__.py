"""
Doctor Booking Service

A FastAPI service for booking appointments between patients and doctors,
with slot allocation that never double-books and an appointment status
lifecycle managed in one place.
"""

__version__ = "1.0.0"
