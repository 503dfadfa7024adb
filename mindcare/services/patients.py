# therapist patient list: patients linked to a therapist through bookings,
# joined with their entry in the all-patient-progress index

import logging
from typing import Dict, List

from mindcare.models.report import Booking, TherapistPatient
from mindcare.services.progress import TherapyProgressEngine
from mindcare.services.reports import booking_time, load_bookings

logger = logging.getLogger(__name__)


def get_therapist_patients(engine: TherapyProgressEngine, therapist_id: str) -> List[TherapistPatient]:
    """one row per patient, newest booking first"""
    latest: Dict[str, Booking] = {}
    for booking in load_bookings(engine.store):
        if therapist_id not in (booking.therapist_id, booking.therapist_name):
            continue
        current = latest.get(booking.patient_id)
        if current is None or booking_time(booking) >= booking_time(current):
            latest[booking.patient_id] = booking

    index = engine.get_all_patient_progress()
    rows = [
        TherapistPatient(
            patientId=patient_id,
            patientName=booking.patient_name,
            lastBookingDate=booking.date or booking.created_at,
            progress=index.get(patient_id),
        )
        for patient_id, booking in latest.items()
    ]
    rows.sort(key=lambda r: booking_time(latest[r.patient_id]), reverse=True)
    logger.debug(f"Therapist {therapist_id} has {len(rows)} patient(s)")
    return rows
