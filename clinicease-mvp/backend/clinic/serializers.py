"""
Response serializers: 领域对象 / ORM 对象 → JSON-able dict。

只负责「输出格式化」，不做任何解析或校验。
输入解析和校验在 clinic/intake/ adapter 系统和 services.py 里。
"""

from dataclasses import asdict

from .opd.table import parse_table
from .opd.text import normalize_gender, title_case


def _drop_none(d):
    return {k: v for k, v in d.items() if v is not None}


def serialize_summary(summary):
    """
    OpdSummary → dict。
    None 字段不输出：字段出现 ⇔ 用户填了内容。
    """
    body = _drop_none({
        'patient': _drop_none(asdict(summary.patient)),
        'vitals': summary.vitals.as_dict() if summary.vitals else None,
        'chief_complaint': summary.chief_complaint,
        'examination_findings': summary.examination_findings,
        'medical_history': summary.medical_history,
        'diagnosis_label': summary.diagnosis_label,
        'diagnosis': summary.diagnosis,
        'tooth_notes': summary.tooth_notes,
        'radiographs': summary.radiographs,
        'tests_advised': summary.tests_advised,
        'treatments_advised': summary.treatments_advised,
        'prescription_table': summary.prescription_table,
        'additional_notes': summary.additional_notes,
        'follow_up_date': summary.follow_up_date,
    })
    return {'opd_summary': body}


def serialize_prescription_draft(draft):
    """Serialize AI prescription draft with status-dependent fields."""
    response = {
        'draft_id': str(draft.id),
        'status': draft.status,
        'created_at': draft.created_at.isoformat(),
        'updated_at': draft.updated_at.isoformat(),
    }

    if draft.status == 'pending':
        response['message'] = 'Prescription is queued for processing'
    elif draft.status == 'processing':
        response['message'] = 'Prescription is being generated, please wait...'
    elif draft.status == 'completed':
        parsed = parse_table(draft.prescription_table)
        response['message'] = 'Prescription generated successfully'
        response['completed_at'] = draft.completed_at.isoformat() if draft.completed_at else None
        response['prescription_table'] = draft.prescription_table
        response['llm_model'] = draft.llm_model
        response['rows'] = parsed.rows if parsed else []
    elif draft.status == 'failed':
        response['message'] = 'Prescription generation failed'
        response['error'] = {
            'message': draft.error_message,
            'retry_allowed': True,
        }

    return response


def serialize_patient(patient):
    return {
        'id': patient.id,
        'name': patient.name,
        'age': patient.age,
        'sex': patient.sex or None,
        'phone': patient.phone,
        'address': patient.address,
        'email': patient.email,
        'govt_id': patient.govt_id,
        'avatar_url': patient.avatar_url,
    }


def serialize_patient_detail(patient):
    """患者详情 + OPD 表单预填值（camelCase，前端表单直接用）。"""
    response = serialize_patient(patient)
    response['opd_prefill'] = {
        'patientId': patient.id,
        'patientName': title_case(patient.name),
        'patientAge': str(patient.age) if patient.age is not None else '',
        'patientGender': normalize_gender(patient.sex),
        'patientContact': patient.phone,
        'patientAddress': title_case(patient.address),
        'govtId': patient.govt_id,
    }
    return response


def serialize_patient_list(patients):
    results = [serialize_patient(p) for p in patients]
    return {
        'count': len(results),
        'patients': results,
    }


def serialize_doctor(doctor):
    return {
        'id': doctor.id,
        'name': doctor.name,
        'qualification': doctor.qualification,
        'registration_id': doctor.registration_id,
    }


def serialize_appointment(appointment):
    return {
        'id': appointment.id,
        'patient_id': appointment.patient_id,
        'patient_name': appointment.patient_name,
        'doctor_id': appointment.doctor_id,
        'doctor_name': appointment.doctor.name,
        'date_time': appointment.date_time.isoformat(),
        'duration_minutes': appointment.duration_minutes,
        'reason': appointment.reason,
        'notes': appointment.notes,
        'priority': appointment.priority,
        'status': appointment.status,
    }


def serialize_appointment_list(appointments):
    results = [serialize_appointment(a) for a in appointments]
    return {
        'count': len(results),
        'appointments': results,
    }


def serialize_dashboard(stats):
    return {
        'date': stats['date'].isoformat(),
        'patients_today': stats['patients_today'],
        'pending_today': stats['pending_today'],
        'total_patients': stats['total_patients'],
        'doctors': stats['doctors'],
        'next_appointments': [
            {
                'id': a.id,
                'patient_name': a.patient_name,
                'doctor_name': a.doctor.name,
                'date_time': a.date_time.isoformat(),
                'reason': a.reason,
                'priority': a.priority,
            }
            for a in stats['next_appointments']
        ],
    }
