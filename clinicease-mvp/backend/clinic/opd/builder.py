"""
OPD Summary Builder: OpdFormInput → OpdSummary 的纯函数。

不做 I/O、不做校验（必填项由 validation.validate_opd_form 在前面把关）。
流水线：
  1. 过滤动态列表，只保留 active 条目
  2. vitals（任一字段非空才输出）
  3. 诊断标签 + 文本
  4. 牙位备注，按 canonical 顺序拼接
  5. 影像检查
  6. 化验 / 治疗建议
  7. 处方表
  8. 组装
任何意外异常统一转成 SummaryBuildError，不返回半成品。
"""

import logging

from ..dental.chart import ordered_notes
from ..exceptions import SummaryBuildError
from .table import PRESCRIPTION_HEADER, render_table
from .text import capitalize_first, or_none, title_case, upper
from .types import MedicineEntry, OpdFormInput, OpdSummary, PatientDetails, RadiographEntry

logger = logging.getLogger(__name__)

FINAL_DIAGNOSIS_LABEL = "Final Diagnosis"
PROVISIONAL_DIAGNOSIS_LABEL = "Provisional Diagnosis"


def diagnosis_label(is_final: bool) -> str:
    return FINAL_DIAGNOSIS_LABEL if is_final else PROVISIONAL_DIAGNOSIS_LABEL


def format_tooth_notes(notes: dict):
    rendered = [f"#{tooth}: {note}" for tooth, note in ordered_notes(notes)]
    return ", ".join(rendered) or None


def format_radiograph(entry: RadiographEntry) -> str:
    if entry.tooth_number:
        return f"{entry.type} (w.r.t #{entry.tooth_number})"
    return entry.type


def join_values(entries):
    return ", ".join(e.value for e in entries if e.is_active) or None


def medicine_row(m: MedicineEntry) -> list[str]:
    return [
        upper(m.name),
        f"{m.dosage_value} {m.dosage_unit}".strip(),
        f"{m.frequency_value} time(s) {m.frequency_unit}".strip(),
        f"{m.duration_value} {m.duration_unit}".strip(),
        m.instructions,
    ]


def build_prescription_table(medicines):
    """没有 active 药品 → None；否则按原顺序每药一行。"""
    active = [m for m in medicines if m.is_active]
    if not active:
        return None
    return render_table(PRESCRIPTION_HEADER, [medicine_row(m) for m in active])


def _assemble(form: OpdFormInput) -> OpdSummary:
    radiographs = [format_radiograph(r) for r in form.radiographs if r.is_active]

    return OpdSummary(
        patient=PatientDetails(
            id=or_none(form.patient_id),
            name=title_case(form.patient_name),
            age=form.patient_age,
            gender=or_none(form.patient_gender),
            contact=or_none(form.patient_contact),
            address=or_none(title_case(form.patient_address)),
            govt_id=or_none(form.govt_id),
        ),
        vitals=form.vitals if form.vitals.is_present else None,
        chief_complaint=or_none(capitalize_first(form.chief_complaint)),
        examination_findings=or_none(capitalize_first(form.examination_findings)),
        medical_history=or_none(capitalize_first(form.medical_history)),
        diagnosis_label=diagnosis_label(form.is_final_diagnosis),
        diagnosis=capitalize_first(form.provisional_diagnosis),
        tooth_notes=format_tooth_notes(form.tooth_notes),
        radiographs=", ".join(radiographs) or None,
        tests_advised=join_values(form.tests),
        treatments_advised=join_values(form.treatments),
        prescription_table=build_prescription_table(form.medicines),
        additional_notes=or_none(capitalize_first(form.additional_notes)),
        follow_up_date=or_none(form.follow_up_date),
    )


def build_summary(form: OpdFormInput) -> OpdSummary:
    try:
        return _assemble(form)
    except Exception as exc:
        logger.exception("OPD summary generation failed (source=%s)", getattr(form, "source", ""))
        raise SummaryBuildError(
            message="An unexpected error occurred. Please try again.",
        ) from exc
