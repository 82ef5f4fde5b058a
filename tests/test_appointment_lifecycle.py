import pytest
from datetime import time

from doctor_booking.core.exceptions import NotFoundError, ForbiddenError, InvalidTransitionError
from doctor_booking.models import Appointment, AppointmentStatus
from doctor_booking.services.appointment_lifecycle import (
    AppointmentLifecycle, TRANSITIONS, validate_transition
)
from doctor_booking.services.appointment_store import AppointmentStore
from tests.conftest import TestingSessionLocal, make_patient, make_doctor


def _appointment(db, patient, doctor, day, status=AppointmentStatus.PENDING):
    appointment = Appointment(
        patient_id=patient.id, doctor_id=doctor.id,
        appointment_date=day, appointment_time=time(9, 0), status=status
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment


class TestValidateTransition:

    def test_terminal_states_accept_nothing(self):
        for terminal in (AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED):
            assert TRANSITIONS[terminal] == set()
            for target in AppointmentStatus:
                with pytest.raises(InvalidTransitionError):
                    validate_transition(terminal, target)

    def test_legal_transitions(self):
        validate_transition(AppointmentStatus.PENDING, AppointmentStatus.CANCELLED)
        validate_transition(AppointmentStatus.PENDING, AppointmentStatus.COMPLETED)
        validate_transition(AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED)
        validate_transition(AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED)
        validate_transition(AppointmentStatus.CONFIRMED, AppointmentStatus.COMPLETED)

    def test_nothing_returns_to_pending(self):
        for current in AppointmentStatus:
            with pytest.raises(InvalidTransitionError):
                validate_transition(current, AppointmentStatus.PENDING)

    def test_cancel_reasons(self):
        with pytest.raises(InvalidTransitionError, match="completed"):
            validate_transition(AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED)
        with pytest.raises(InvalidTransitionError, match="already cancelled"):
            validate_transition(AppointmentStatus.CANCELLED, AppointmentStatus.CANCELLED)


class TestCancelAppointment:

    def test_owner_cancels_pending(self, db_session, future_day):
        patient = make_patient(db_session)
        doctor = make_doctor(db_session)
        appointment = _appointment(db_session, patient, doctor, future_day)

        cancelled = AppointmentLifecycle(db_session).cancel_appointment(appointment.id, patient.id)

        assert cancelled.status == AppointmentStatus.CANCELLED
        assert db_session.query(Appointment).count() == 1

    def test_second_cancel_is_invalid(self, db_session, future_day):
        patient = make_patient(db_session)
        doctor = make_doctor(db_session)
        appointment = _appointment(db_session, patient, doctor, future_day)
        lifecycle = AppointmentLifecycle(db_session)

        lifecycle.cancel_appointment(appointment.id, patient.id)
        with pytest.raises(InvalidTransitionError, match="already cancelled"):
            lifecycle.cancel_appointment(appointment.id, patient.id)

    def test_confirmed_can_be_cancelled(self, db_session, future_day):
        patient = make_patient(db_session)
        doctor = make_doctor(db_session)
        appointment = _appointment(db_session, patient, doctor, future_day, AppointmentStatus.CONFIRMED)

        cancelled = AppointmentLifecycle(db_session).cancel_appointment(appointment.id, patient.id)
        assert cancelled.status == AppointmentStatus.CANCELLED

    def test_unknown_appointment(self, db_session):
        patient = make_patient(db_session)

        with pytest.raises(NotFoundError) as exc_info:
            AppointmentLifecycle(db_session).cancel_appointment(404, patient.id)
        assert exc_info.value.entity == "appointment"

    def test_non_owner_is_forbidden(self, db_session, future_day):
        owner = make_patient(db_session)
        intruder = make_patient(db_session, email="intruder@example.com")
        doctor = make_doctor(db_session)
        appointment = _appointment(db_session, owner, doctor, future_day)

        with pytest.raises(ForbiddenError):
            AppointmentLifecycle(db_session).cancel_appointment(appointment.id, intruder.id)

        db_session.expire_all()
        assert db_session.get(Appointment, appointment.id).status == AppointmentStatus.PENDING

    def test_ownership_is_checked_before_status(self, db_session, future_day):
        owner = make_patient(db_session)
        intruder = make_patient(db_session, email="intruder@example.com")
        doctor = make_doctor(db_session)
        appointment = _appointment(db_session, owner, doctor, future_day, AppointmentStatus.COMPLETED)

        with pytest.raises(ForbiddenError):
            AppointmentLifecycle(db_session).cancel_appointment(appointment.id, intruder.id)

    def test_completed_cannot_be_cancelled(self, db_session, future_day):
        patient = make_patient(db_session)
        doctor = make_doctor(db_session)
        appointment = _appointment(db_session, patient, doctor, future_day, AppointmentStatus.COMPLETED)

        with pytest.raises(InvalidTransitionError, match="completed"):
            AppointmentLifecycle(db_session).cancel_appointment(appointment.id, patient.id)

        db_session.expire_all()
        assert db_session.get(Appointment, appointment.id).status == AppointmentStatus.COMPLETED

    def test_concurrent_cancel_sees_committed_status(self, db_session, future_day):
        patient = make_patient(db_session)
        doctor = make_doctor(db_session)
        appointment = _appointment(db_session, patient, doctor, future_day)

        # A second caller loaded the row while it was still PENDING
        other = TestingSessionLocal()
        try:
            stale = AppointmentStore(other).find_by_id(appointment.id)
            assert stale.status == AppointmentStatus.PENDING

            AppointmentLifecycle(db_session).cancel_appointment(appointment.id, patient.id)

            assert AppointmentStore(other).update_status(stale, AppointmentStatus.CANCELLED) is None
            with pytest.raises(InvalidTransitionError, match="already cancelled"):
                AppointmentLifecycle(other).cancel_appointment(appointment.id, patient.id)
        finally:
            other.close()


class TestCompleteAppointment:

    @pytest.mark.parametrize("status", [AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED])
    def test_completes_open_appointment(self, db_session, future_day, status):
        patient = make_patient(db_session)
        doctor = make_doctor(db_session)
        appointment = _appointment(db_session, patient, doctor, future_day, status)

        completed = AppointmentLifecycle(db_session).complete_appointment(appointment.id)
        assert completed.status == AppointmentStatus.COMPLETED

    def test_cancelled_cannot_be_completed(self, db_session, future_day):
        patient = make_patient(db_session)
        doctor = make_doctor(db_session)
        appointment = _appointment(db_session, patient, doctor, future_day, AppointmentStatus.CANCELLED)

        with pytest.raises(InvalidTransitionError):
            AppointmentLifecycle(db_session).complete_appointment(appointment.id)

    def test_unknown_appointment(self, db_session):
        with pytest.raises(NotFoundError):
            AppointmentLifecycle(db_session).complete_appointment(404)
