"""
OPD 表单校验：纯函数，返回字段级错误列表 [{field, message}]。

builder 只接收校验通过的输入，所以必填项、枚举值都在这里检查。
字段名用前端表单里的名字（camelCase），前端可以直接把错误挂到对应输入框旁边。
"""

from ..dental.chart import TOOTH_CONDITIONS, is_valid_tooth_id
from .types import (
    DOSAGE_UNITS,
    DURATION_UNITS,
    FREQUENCY_UNITS,
    GENDERS,
    RADIOGRAPH_TYPES,
    OpdFormInput,
)


def _error(field: str, message: str) -> dict:
    return {"field": field, "message": message}


def _check_required(form: OpdFormInput) -> list[dict]:
    errors = []
    if not form.patient_name.strip():
        errors.append(_error("patientName", "Patient name is required."))
    if not form.patient_age.strip():
        errors.append(_error("patientAge", "Patient age is required."))
    if not form.provisional_diagnosis.strip():
        errors.append(_error("provisionalDiagnosis", "Diagnosis is required."))
    if form.patient_gender and form.patient_gender not in GENDERS:
        errors.append(_error("patientGender", f"Gender must be one of {', '.join(GENDERS)}."))
    return errors


def _check_medicines(form: OpdFormInput) -> list[dict]:
    errors = []
    for i, m in enumerate(form.medicines):
        # 药名为空的整行会被丢弃，不校验其余字段
        if not m.is_active:
            continue
        prefix = f"medicines[{i}]"
        if not (m.dosage_value.strip() and m.frequency_value.strip() and m.duration_value.strip()):
            errors.append(_error(f"{prefix}.dosageValue", "Dosage, frequency, and duration are required."))
        if m.dosage_unit not in DOSAGE_UNITS:
            errors.append(_error(f"{prefix}.dosageUnit", f"Unknown dosage unit: {m.dosage_unit!r}."))
        if m.frequency_unit not in FREQUENCY_UNITS:
            errors.append(_error(f"{prefix}.frequencyUnit", f"Unknown frequency unit: {m.frequency_unit!r}."))
        if m.duration_unit not in DURATION_UNITS:
            errors.append(_error(f"{prefix}.durationUnit", f"Unknown duration unit: {m.duration_unit!r}."))
    return errors


def _check_dental(form: OpdFormInput) -> list[dict]:
    errors = []
    for tooth, note in form.tooth_notes.items():
        if not is_valid_tooth_id(tooth):
            errors.append(_error(f"toothNotes.{tooth}", f"Unknown tooth id: {tooth!r}."))
        elif note not in TOOTH_CONDITIONS:
            errors.append(_error(f"toothNotes.{tooth}", f"Unknown tooth condition: {note!r}."))

    for i, r in enumerate(form.radiographs):
        if r.type and r.type not in RADIOGRAPH_TYPES:
            errors.append(_error(f"radiographs[{i}].type", f"Unknown radiograph type: {r.type!r}."))
    return errors


def validate_opd_form(form: OpdFormInput) -> list[dict]:
    """返回所有字段错误；空列表表示可以交给 builder。"""
    return _check_required(form) + _check_medicines(form) + _check_dental(form)
