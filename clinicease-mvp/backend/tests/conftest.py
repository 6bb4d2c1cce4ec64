"""
Shared fixtures for all tests.

factory-boy factories live here so both unit/ and integration/ can import them.
"""
import pytest
from datetime import datetime, time
from django.test import Client
from django.utils import timezone

import factory
from clinic import store
from clinic.models import Appointment, Doctor, Patient, PrescriptionDraft


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

class DoctorFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Doctor

    id = factory.Sequence(lambda n: f'doc{100 + n}')
    name = 'Dr. Priya Sharma'
    qualification = 'BDS'
    registration_id = 'A-10234'


class PatientFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Patient

    id = factory.Sequence(lambda n: f'P-{100000 + n}')
    name = 'Aarav Patel'
    age = 45
    sex = 'Male'
    phone = '9876543210'
    address = '123 Gandhi Nagar, Mumbai'


class AppointmentFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Appointment

    id = factory.Sequence(lambda n: f'APP-{200000 + n}')
    patient = factory.SubFactory(PatientFactory)
    doctor = factory.SubFactory(DoctorFactory)
    patient_name = factory.LazyAttribute(lambda o: o.patient.name)
    date_time = factory.LazyFunction(
        lambda: timezone.make_aware(datetime.combine(timezone.localdate(), time(10, 0)))
    )
    reason = 'Routine Checkup'
    duration_minutes = 30
    priority = 'Medium'
    status = 'upcoming'


class PrescriptionDraftFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = PrescriptionDraft

    speech_input = 'Paracetamol 500 mg twice a day after food for 5 days'
    status = 'pending'


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

AUTH_TOKEN = 'test-token'


@pytest.fixture(autouse=True)
def clinic_settings(settings, monkeypatch):
    """静态 token 认证 + 内存 key-value store，每个测试一份干净的 store。"""
    settings.IDENTITY_PROVIDER = 'static'
    settings.CLINIC_API_TOKENS = [AUTH_TOKEN]
    settings.KV_STORE_BACKEND = 'memory'
    settings.CLINIC_NAME = 'ClinicEase Test Clinic'
    monkeypatch.setattr(store, '_memory_store', None)
    return settings


@pytest.fixture
def api_client():
    """Django test client with a valid bearer token."""
    return Client(HTTP_AUTHORIZATION=f'Bearer {AUTH_TOKEN}')


@pytest.fixture
def anonymous_client():
    return Client()


@pytest.fixture
def paracetamol():
    """The reference medicine row used across builder / API tests."""
    return {
        'name': 'paracetamol',
        'dosageValue': '500',
        'dosageUnit': 'mg',
        'frequencyValue': '2',
        'frequencyUnit': 'daily',
        'durationValue': '5',
        'durationUnit': 'Days',
        'instructions': 'After food',
    }


@pytest.fixture
def sample_dental_payload(paracetamol):
    """Minimal valid payload for POST /api/opd/dental/summary/."""
    return {
        'patientId': 'CZ-123456',
        'patientName': '  john DOE  ',
        'patientAge': '34',
        'patientGender': 'male',
        'patientContact': '9876543210',
        'vitals': {'bp': '120/80', 'pulse': '72'},
        'chiefComplaint': 'pain in lower left tooth',
        'medicalHistory': 'hypertension and diabetes',
        'provisionalDiagnosis': 'irreversible pulpitis',
        'isFinalDiagnosis': False,
        'toothNotes': [
            {'tooth': 'LL3', 'note': 'mobile'},
            {'tooth': 'UR8', 'note': 'missing'},
        ],
        'radiographs': [{'type': 'IOPA', 'toothNumber': '33'}, {'type': 'OPG'}],
        'medicines': [paracetamol],
        'testsAdvised': [{'value': 'CBC'}],
    }


@pytest.fixture
def sample_general_payload(paracetamol):
    """Minimal valid payload for POST /api/opd/general/summary/."""
    return {
        'patientName': 'priya singh',
        'patientAge': '32',
        'patientGender': 'Female',
        'height': '160',
        'weight': '55',
        'chiefComplaint': 'fever since 3 days',
        'provisionalDiagnosis': 'viral fever',
        'isFinalDiagnosis': True,
        'medicines': [paracetamol],
        'testsAdvised': [{'value': 'CBC'}, {'value': ''}],
        'treatmentsAdvised': [{'value': 'Steam inhalation'}],
        'followUpDate': 'After 1 week',
    }
