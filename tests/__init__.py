"""
Test suite for the Doctor Booking Service.

Contains unit tests for slot allocation and the appointment lifecycle, and
API tests for the HTTP surface.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"
