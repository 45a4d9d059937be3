# FILE: frontdesk/services/registration_services.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from frontdesk.services import (
    billing_advance,
    credentials,
    identity,
    ipd_beds,
    opd_appointments,
    opd_queue,
    patient_writer,
    uhid,
)


@dataclass
class RegistrationServices:
    """
    Collaborators the registration workflow calls. Defaults are the
    database-backed implementations; swap any of them per deployment or test.
    """

    allocate_uhid: Callable = uhid.allocate_uhid
    issue_credentials: Callable = credentials.issue_credentials
    create_party: Callable = identity.create_party
    link_identity: Callable = identity.link_identity
    write_patient: Callable = patient_writer.write_patient
    mark_admitted: Callable = patient_writer.mark_patient_admitted
    pick_active_doctor: Callable = opd_appointments.pick_active_doctor
    create_appointment: Callable = opd_appointments.create_appointment
    create_encounter_appointment: Callable = opd_appointments.create_encounter_appointment
    add_to_queue: Callable = opd_queue.add_to_queue
    allocate_bed: Callable = ipd_beds.allocate_bed
    create_advance_record: Callable = billing_advance.create_advance_record
