import logging
from datetime import timedelta

from django.db.models import Max, Q
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from .dental.chart import TOOTH_CONDITIONS, chart_rows
from .exceptions import BlockError, ExternalServiceError, ValidationError, WarningError
from .identifiers import (
    APPOINTMENT_PREFIX,
    OPD_SESSION_PREFIX,
    PATIENT_PREFIX,
    short_id,
    unique_short_id,
)
from .intake import get_adapter
from .models import Appointment, Doctor, Patient, PrescriptionDraft
from .opd import build_summary
from .opd.printing import ClinicHeader
from .opd.table import AI_PRESCRIPTION_HEADER, parse_table

logger = logging.getLogger(__name__)


# ── OPD summary ───────────────────────────────────────────────────────────

def new_opd_session():
    """打开表单时调用：给新患者发一个会话内唯一的 id，附带空白牙位图。"""
    return {
        'patient_id': short_id(OPD_SESSION_PREFIX),
        'tooth_chart': chart_rows({}),
        'tooth_conditions': list(TOOTH_CONDITIONS),
    }


def generate_summary(source, raw_body, content_type=''):
    """
    intake（parse → transform → validate）→ builder。
    Raises ValidationError / SummaryBuildError: View 层不需要处理，exception_handler 统一兜底。
    """
    form = get_adapter(source, raw_body, content_type).process()
    summary = build_summary(form)
    logger.info(
        "OPD summary generated: source=%s medicines=%d teeth=%d",
        source, sum(1 for m in form.medicines if m.is_active), len(form.tooth_notes),
    )
    return summary


def clinic_header(profile):
    return ClinicHeader(
        name=profile['clinic_name'],
        doctor_name=profile['doctor_name'],
        qualification=profile['qualification'],
        registration_id=profile['registration_id'],
        address=profile['address'],
        phone=profile['phone'],
    )


# ── Patients / Doctors ────────────────────────────────────────────────────

def _field_errors(errors):
    if errors:
        raise ValidationError(
            message='Request validation failed.',
            code='VALIDATION_ERROR',
            detail={'errors': errors},
        )


def _require_object(data):
    if not isinstance(data, dict):
        raise ValidationError(message='Request body must be a JSON object.', code='INVALID_JSON')


def _clean_str(data, key):
    value = data.get(key)
    return '' if value is None else str(value).strip()


def _parse_age(data, errors):
    raw = data.get('age')
    if raw in (None, ''):
        return None
    try:
        age = int(raw)
    except (TypeError, ValueError):
        errors.append({'field': 'age', 'message': 'Age must be a whole number.'})
        return None
    if age < 0:
        errors.append({'field': 'age', 'message': 'Age cannot be negative.'})
        return None
    return age


def _parse_sex(data, errors):
    sex = _clean_str(data, 'sex')
    if sex and sex not in ('Male', 'Female', 'Other'):
        errors.append({'field': 'sex', 'message': 'Sex must be Male, Female or Other.'})
        return ''
    return sex


def get_patient(patient_id):
    """Raises BlockError(404) if not found."""
    try:
        return Patient.objects.get(id=patient_id)
    except Patient.DoesNotExist:
        raise BlockError(
            message='Patient not found',
            code='PATIENT_NOT_FOUND',
            detail={'patient_id': str(patient_id)},
            http_status=404,
        )


def search_patients(query=''):
    patients = Patient.objects.all()
    if query:
        patients = patients.filter(
            Q(id__icontains=query) |
            Q(name__icontains=query) |
            Q(phone__icontains=query)
        )
    return patients.order_by('name')[:50]


def create_patient(data):
    _require_object(data)
    errors = []
    name = _clean_str(data, 'name')
    if not name:
        errors.append({'field': 'name', 'message': 'Patient name is required.'})
    age = _parse_age(data, errors)
    sex = _parse_sex(data, errors)
    _field_errors(errors)

    patient = Patient.objects.create(
        id=unique_short_id(PATIENT_PREFIX, lambda pid: Patient.objects.filter(id=pid).exists()),
        name=name,
        age=age,
        sex=sex,
        phone=_clean_str(data, 'phone'),
        address=_clean_str(data, 'address'),
        email=_clean_str(data, 'email'),
        govt_id=_clean_str(data, 'govtId'),
    )
    logger.info("Patient created: id=%s", patient.id)
    return patient


def list_doctors():
    return Doctor.objects.all()


def _get_doctor(doctor_id, errors):
    if not doctor_id:
        errors.append({'field': 'doctorId', 'message': 'Doctor is required.'})
        return None
    doctor = Doctor.objects.filter(id=doctor_id).first()
    if doctor is None:
        errors.append({'field': 'doctorId', 'message': f'Unknown doctor: {doctor_id!r}.'})
    return doctor


# ── Appointments ──────────────────────────────────────────────────────────

def _parse_date_time(data, errors):
    raw = _clean_str(data, 'dateTime')
    if not raw:
        errors.append({'field': 'dateTime', 'message': 'An appointment date is required.'})
        return None
    try:
        value = parse_datetime(raw)
    except ValueError:
        value = None
    if value is None:
        errors.append({'field': 'dateTime', 'message': f'Invalid date/time: {raw!r}.'})
        return None
    if timezone.is_naive(value):
        value = timezone.make_aware(value)
    return value


def _parse_duration(data, errors):
    raw = data.get('durationMinutes')
    if raw in (None, ''):
        return 30
    try:
        minutes = int(raw)
    except (TypeError, ValueError):
        minutes = 0
    if minutes <= 0:
        errors.append({'field': 'durationMinutes', 'message': 'Duration must be a positive number of minutes.'})
        return 30
    return minutes


def _check_choice(data, key, choices, errors, default=''):
    value = _clean_str(data, key) or default
    if value and value not in dict(choices):
        errors.append({'field': key, 'message': f'Must be one of {", ".join(dict(choices))}.'})
    return value


def check_appointment_overlap(doctor, start, duration_minutes, exclude_id=None):
    """
    同一医生、时间段重叠的 upcoming 预约 → 返回警告列表。

    按时间区间取候选，跨午夜的预约也会比较。
    """
    end = start + timedelta(minutes=duration_minutes)
    upcoming = Appointment.objects.filter(doctor=doctor, status='upcoming')
    if exclude_id:
        upcoming = upcoming.exclude(id=exclude_id)

    longest = upcoming.aggregate(longest=Max('duration_minutes'))['longest'] or 0
    candidates = upcoming.filter(
        date_time__lt=end,
        date_time__gt=start - timedelta(minutes=longest),
    )

    warnings = []
    for other in candidates:
        other_end = other.date_time + timedelta(minutes=other.duration_minutes)
        if other.date_time < end and start < other_end:
            warnings.append({
                'code': 'APPOINTMENT_OVERLAP',
                'message': (
                    f"{doctor.name} already has an appointment with {other.patient_name} "
                    f"at {timezone.localtime(other.date_time):%H:%M} ({other.duration_minutes} min)."
                ),
                'appointment_id': other.id,
            })
    return warnings


def create_appointment(data):
    """
    已有患者传 patientId；新患者传 patientName 等信息，会顺带创建 Patient。
    时间冲突 → WarningError，带 confirm=true 重新提交则忽略。
    """
    _require_object(data)
    errors = []
    patient = None
    patient_id = _clean_str(data, 'patientId')
    if patient_id:
        patient = Patient.objects.filter(id=patient_id).first()
        if patient is None:
            errors.append({'field': 'patientId', 'message': f'Unknown patient: {patient_id!r}.'})

    patient_name = _clean_str(data, 'patientName') or (patient.name if patient else '')
    if not patient_name:
        errors.append({'field': 'patientName', 'message': 'Patient name is required.'})
    reason = _clean_str(data, 'reason')
    if not reason:
        errors.append({'field': 'reason', 'message': 'Reason for appointment is required.'})

    date_time = _parse_date_time(data, errors)
    doctor = _get_doctor(_clean_str(data, 'doctorId'), errors)
    duration = _parse_duration(data, errors)
    priority = _check_choice(data, 'priority', Appointment.PRIORITY_CHOICES, errors, default='Medium')
    age = _parse_age(data, errors)
    sex = _parse_sex(data, errors)
    _field_errors(errors)

    confirm = bool(data.get('confirm', False))
    warnings = check_appointment_overlap(doctor, date_time, duration)
    if warnings and not confirm:
        raise WarningError(
            message='The selected slot overlaps another appointment. Resubmit with confirm=true to book anyway.',
            detail={'warnings': warnings},
        )

    if patient is None:
        patient = Patient.objects.create(
            id=unique_short_id(PATIENT_PREFIX, lambda pid: Patient.objects.filter(id=pid).exists()),
            name=patient_name,
            age=age,
            sex=sex,
            phone=_clean_str(data, 'phone'),
            address=_clean_str(data, 'address'),
        )

    appointment = Appointment.objects.create(
        id=unique_short_id(APPOINTMENT_PREFIX, lambda aid: Appointment.objects.filter(id=aid).exists()),
        patient=patient,
        doctor=doctor,
        patient_name=patient_name,
        date_time=date_time,
        reason=reason,
        notes=_clean_str(data, 'notes'),
        priority=priority,
        duration_minutes=duration,
    )
    logger.info("Appointment created: id=%s doctor=%s at=%s", appointment.id, doctor.id, date_time.isoformat())
    return appointment


def get_appointment(appointment_id):
    try:
        return Appointment.objects.select_related('doctor', 'patient').get(id=appointment_id)
    except Appointment.DoesNotExist:
        raise BlockError(
            message='Appointment not found',
            code='APPOINTMENT_NOT_FOUND',
            detail={'appointment_id': str(appointment_id)},
            http_status=404,
        )


def update_appointment(appointment_id, data):
    """部分更新：status / dateTime / durationMinutes / reason / notes / priority。"""
    _require_object(data)
    appointment = get_appointment(appointment_id)
    errors = []

    if 'status' in data:
        appointment.status = _check_choice(data, 'status', Appointment.STATUS_CHOICES, errors)
    if 'priority' in data:
        appointment.priority = _check_choice(data, 'priority', Appointment.PRIORITY_CHOICES, errors)
    if 'reason' in data:
        appointment.reason = _clean_str(data, 'reason')
        if not appointment.reason:
            errors.append({'field': 'reason', 'message': 'Reason for appointment is required.'})
    if 'notes' in data:
        appointment.notes = _clean_str(data, 'notes')
    if 'dateTime' in data:
        appointment.date_time = _parse_date_time(data, errors)
    if 'durationMinutes' in data:
        appointment.duration_minutes = _parse_duration(data, errors)
    _field_errors(errors)

    rescheduled = 'dateTime' in data or 'durationMinutes' in data
    if rescheduled and appointment.status == 'upcoming' and not data.get('confirm', False):
        warnings = check_appointment_overlap(
            appointment.doctor, appointment.date_time, appointment.duration_minutes,
            exclude_id=appointment.id,
        )
        if warnings:
            raise WarningError(
                message='The selected slot overlaps another appointment. Resubmit with confirm=true to book anyway.',
                detail={'warnings': warnings},
            )

    appointment.save()
    return appointment


def list_appointments(date=None, doctor_id=None):
    appointments = Appointment.objects.select_related('doctor', 'patient')
    if date:
        appointments = appointments.filter(date_time__date=date)
    if doctor_id:
        appointments = appointments.filter(doctor_id=doctor_id)
    return appointments.order_by('date_time')


def dashboard_stats(today=None):
    today = today or timezone.localdate()
    todays = Appointment.objects.filter(date_time__date=today).select_related('doctor')
    upcoming = todays.filter(status='upcoming').order_by('date_time')

    return {
        'date': today,
        'patients_today': todays.count(),
        'pending_today': upcoming.count(),
        'total_patients': Patient.objects.count(),
        'doctors': Doctor.objects.count(),
        'next_appointments': list(upcoming[:5]),
    }


# ── AI prescription ───────────────────────────────────────────────────────

SYSTEM_PROMPT = "You are an AI assistant helping doctors in India write prescriptions."


def build_prompt(speech_input):
    """Build LLM prompt for structuring a dictated prescription"""
    header = " | ".join(AI_PRESCRIPTION_HEADER)
    return f"""The doctor dictated the following prescription:

\"\"\"{speech_input}\"\"\"

Convert it into a Markdown table with exactly these columns:
| {header} |

Rules:
- One row per medicine, in the order dictated.
- Timing is how often / when to take it (e.g. "1-0-1 after food").
- Duration (Days) is a number of days only.
- Leave a cell empty if the doctor did not say it. Do not invent values.
- Output only the table, with the header row and the |---| separator row."""


def structure_prescription(speech_input):
    """
    调用 LLM，返回 (prescription_table, model)。
    返回内容不是预期表头的表格 → ExternalServiceError。
    """
    from .llm import get_llm_service

    response = get_llm_service().complete(SYSTEM_PROMPT, build_prompt(speech_input))
    table = response.content.strip()

    parsed = parse_table(table)
    if parsed is None or tuple(parsed.header) != AI_PRESCRIPTION_HEADER:
        raise ExternalServiceError(
            message='Failed to generate prescription',
            code='LLM_BAD_OUTPUT',
            detail={'header': parsed.header if parsed else None},
        )
    return table, response.model


def create_prescription_draft(data):
    _require_object(data)
    speech_input = _clean_str(data, 'speechInput')
    if not speech_input:
        raise ValidationError(
            message='Request validation failed.',
            detail={'errors': [{'field': 'speechInput', 'message': 'Speech input is required.'}]},
        )

    draft = PrescriptionDraft.objects.create(speech_input=speech_input, status='pending')

    # 通过 Celery 异步分发任务
    from .tasks import generate_prescription_table
    generate_prescription_table.delay(str(draft.id))
    logger.info("Prescription draft %s queued", draft.id)
    return draft


def get_prescription_draft(draft_id):
    try:
        return PrescriptionDraft.objects.get(id=draft_id)
    except PrescriptionDraft.DoesNotExist:
        raise BlockError(
            message='Prescription draft not found',
            code='DRAFT_NOT_FOUND',
            detail={'draft_id': str(draft_id)},
            http_status=404,
        )
