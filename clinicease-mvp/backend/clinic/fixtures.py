"""
演示数据：初始医生、患者、当天预约。

seed_clinic() 幂等：已存在的 id 不会重复创建。
由 `python manage.py seed_clinic` 调用。
"""

import logging
from datetime import datetime, time, timedelta

from django.db import transaction
from django.utils import timezone

from .models import Appointment, Doctor, Patient

logger = logging.getLogger(__name__)

DOCTORS = [
    {'id': 'doc1', 'name': 'Dr. Priya Sharma', 'qualification': 'BDS, MDS (Endodontics)', 'registration_id': 'A-10234'},
    {'id': 'doc2', 'name': 'Dr. Rohan Mehra', 'qualification': 'MBBS, MD (General Medicine)', 'registration_id': 'B-20871'},
]

PATIENTS = [
    {'id': '1', 'name': 'Aarav Patel', 'phone': '9876543210', 'age': 45, 'sex': 'Male',
     'address': '123 Gandhi Nagar, Mumbai', 'email': 'aarav.p@example.com', 'govt_id': 'ABC12345'},
    {'id': '2', 'name': 'Priya Singh', 'phone': '9876543211', 'age': 32, 'sex': 'Female',
     'address': '456 Nehru Park, Delhi', 'email': 'priya.s@example.com', 'govt_id': 'DEF67890'},
    {'id': '3', 'name': 'Rohan Gupta', 'phone': '9876543212', 'age': 28, 'sex': 'Male',
     'address': '789 Tagore Lane, Kolkata', 'email': 'rohan.g@example.com', 'govt_id': 'GHI11223'},
    {'id': '4', 'name': 'Saanvi Sharma', 'phone': '9876543213', 'age': 55, 'sex': 'Female',
     'address': '101 Bose Road, Chennai', 'email': 'saanvi.s@example.com', 'govt_id': 'JKL33445'},
]

# (id, patient_id, doctor_id, day_offset, hh:mm, reason, status, minutes, priority)
APPOINTMENTS = [
    ('1', '1', 'doc1', 0, time(10, 0), 'Routine Checkup', 'upcoming', 30, 'Medium'),
    ('2', '2', 'doc1', 0, time(11, 30), 'Follow-up', 'upcoming', 45, 'High'),
    ('3', '3', 'doc2', 0, time(14, 0), 'Dental Cleaning', 'upcoming', 60, 'Low'),
    ('4', '4', 'doc1', -1, time(10, 0), 'Root Canal', 'finished', 90, 'High'),
]


@transaction.atomic
def seed_clinic(today=None):
    """返回新建条数 {'doctors': n, 'patients': n, 'appointments': n}。"""
    today = today or timezone.localdate()
    created = {'doctors': 0, 'patients': 0, 'appointments': 0}

    for data in DOCTORS:
        _, was_created = Doctor.objects.get_or_create(id=data['id'], defaults=data)
        created['doctors'] += was_created

    for data in PATIENTS:
        _, was_created = Patient.objects.get_or_create(id=data['id'], defaults=data)
        created['patients'] += was_created

    tz = timezone.get_current_timezone()
    for app_id, patient_id, doctor_id, offset, at, reason, status, minutes, priority in APPOINTMENTS:
        patient = Patient.objects.get(id=patient_id)
        date_time = timezone.make_aware(
            datetime.combine(today + timedelta(days=offset), at), tz,
        )
        _, was_created = Appointment.objects.get_or_create(
            id=app_id,
            defaults={
                'patient': patient,
                'doctor_id': doctor_id,
                'patient_name': patient.name,
                'date_time': date_time,
                'reason': reason,
                'status': status,
                'duration_minutes': minutes,
                'priority': priority,
            },
        )
        created['appointments'] += was_created

    logger.info("Seeded clinic fixtures: %s", created)
    return created
