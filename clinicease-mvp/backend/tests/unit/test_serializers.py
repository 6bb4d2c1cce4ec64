"""
Unit tests for response serializers.
"""
import pytest
from django.utils import timezone

from clinic.opd.builder import build_summary
from clinic.opd.types import OpdFormInput, VitalsRecord
from clinic.serializers import (
    serialize_appointment,
    serialize_patient_detail,
    serialize_prescription_draft,
    serialize_summary,
)
from tests.conftest import AppointmentFactory, PatientFactory, PrescriptionDraftFactory

TABLE = '| Medicine | Dosage | Timing | Duration (Days) |\n|---|---|---|---|\n| A | 1 mg | 1-0-1 | 3 |'


class TestSerializeSummary:

    def test_absent_fields_omitted(self):
        summary = build_summary(OpdFormInput(patient_name='john', patient_age='3', provisional_diagnosis='x'))
        body = serialize_summary(summary)['opd_summary']

        assert body == {
            'patient': {'name': 'John', 'age': '3'},
            'diagnosis_label': 'Provisional Diagnosis',
            'diagnosis': 'X',
        }

    def test_vitals_only_non_empty(self):
        summary = build_summary(OpdFormInput(
            patient_name='john', patient_age='3', provisional_diagnosis='x',
            vitals=VitalsRecord(pulse='72'),
        ))
        assert serialize_summary(summary)['opd_summary']['vitals'] == {'pulse': '72'}


@pytest.mark.django_db
class TestSerializePrescriptionDraft:

    def test_pending(self):
        data = serialize_prescription_draft(PrescriptionDraftFactory())
        assert data['status'] == 'pending'
        assert 'prescription_table' not in data

    def test_completed_includes_rows(self):
        draft = PrescriptionDraftFactory(
            status='completed', prescription_table=TABLE, llm_model='claude-test',
            completed_at=timezone.now(),
        )
        data = serialize_prescription_draft(draft)

        assert data['prescription_table'] == TABLE
        assert data['rows'] == [['A', '1 mg', '1-0-1', '3']]
        assert data['llm_model'] == 'claude-test'

    def test_failed(self):
        draft = PrescriptionDraftFactory(status='failed', error_message='LLM timeout')
        data = serialize_prescription_draft(draft)

        assert data['error'] == {'message': 'LLM timeout', 'retry_allowed': True}


@pytest.mark.django_db
class TestSerializePatientAndAppointment:

    def test_opd_prefill(self):
        patient = PatientFactory(name='aarav  PATEL', sex='Male', age=45, address='123 gandhi nagar')
        prefill = serialize_patient_detail(patient)['opd_prefill']

        assert prefill == {
            'patientId': patient.id,
            'patientName': 'Aarav Patel',
            'patientAge': '45',
            'patientGender': 'Male',
            'patientContact': patient.phone,
            'patientAddress': '123 Gandhi Nagar',
            'govtId': '',
        }

    def test_prefill_without_age(self):
        patient = PatientFactory(age=None, sex='')
        prefill = serialize_patient_detail(patient)['opd_prefill']
        assert prefill['patientAge'] == ''
        assert prefill['patientGender'] == ''

    def test_appointment(self):
        appointment = AppointmentFactory()
        data = serialize_appointment(appointment)

        assert data['id'] == appointment.id
        assert data['doctor_name'] == appointment.doctor.name
        assert data['status'] == 'upcoming'
