"""
OPD 汇总 → 可打印的纯文本处方单。

处方表通过 parse_table() 读回，和前端打印端走同一套拆分规则。
"""

from dataclasses import dataclass

from .table import parse_table
from .types import OpdSummary

VITAL_LABELS = (
    ("height", "Height", "cm"),
    ("weight", "Weight", "kg"),
    ("bp", "BP", "mmHg"),
    ("pulse", "Pulse", "/min"),
    ("spo2", "SpO2", "%"),
    ("temp", "Temp", "°F"),
)


@dataclass
class ClinicHeader:
    name: str
    doctor_name: str = ""
    qualification: str = ""
    registration_id: str = ""
    address: str = ""
    phone: str = ""


def _section(title: str, body: str) -> list[str]:
    return [title, f"  {body}", ""]


def _table_lines(content: str) -> list[str]:
    parsed = parse_table(content)
    if parsed is None:
        return [f"  {content}"]

    rows = [parsed.header] + parsed.rows
    widths = [max(len(r[i]) if i < len(r) else 0 for r in rows) for i in range(len(parsed.header))]

    def fmt(cells):
        padded = [(cells[i] if i < len(cells) else "").ljust(w) for i, w in enumerate(widths)]
        return "  " + "  ".join(padded).rstrip()

    return [fmt(parsed.header), "  " + "  ".join("-" * w for w in widths)] + [fmt(r) for r in parsed.rows]


def render_summary_text(summary: OpdSummary, clinic: ClinicHeader, printed_at) -> str:
    p = summary.patient
    lines = [clinic.name]
    if clinic.address or clinic.phone:
        lines.append(" | ".join(x for x in (clinic.address, f"Phone: {clinic.phone}" if clinic.phone else "") if x))
    if clinic.doctor_name:
        lines.append(", ".join(x for x in (clinic.doctor_name, clinic.qualification) if x))
    if clinic.registration_id:
        lines.append(f"Reg. No. {clinic.registration_id}")
    lines.append(f"Date: {printed_at:%d/%m/%Y %H:%M}")
    lines += ["=" * 60, ""]

    lines += [
        "Patient Details",
        f"  Patient ID: {p.id or 'N/A'}",
        f"  Name: {p.name}",
        f"  Age/Gender: {p.age} / {p.gender or 'N/A'}",
        f"  Contact: {p.contact or 'N/A'}",
        f"  Govt. ID: {p.govt_id or 'N/A'}",
        f"  Address: {p.address or 'N/A'}",
        "",
    ]

    if summary.chief_complaint:
        lines += _section("Chief Complaint", summary.chief_complaint)
    if summary.medical_history:
        lines += _section("Medical History", summary.medical_history)
    if summary.vitals:
        present = [
            f"{label}: {getattr(summary.vitals, key)} {unit}"
            for key, label, unit in VITAL_LABELS
            if getattr(summary.vitals, key)
        ]
        lines += _section("Vitals", "   ".join(present))
    if summary.examination_findings:
        lines += _section("Examination Findings", summary.examination_findings)

    lines += _section(summary.diagnosis_label, summary.diagnosis)

    if summary.tooth_notes:
        lines += _section("Tooth Chart Notes", summary.tooth_notes)
    if summary.radiographs:
        lines += _section("Radiographs Advised", summary.radiographs)
    if summary.tests_advised:
        lines += _section("Tests Advised", summary.tests_advised)
    if summary.prescription_table:
        lines += ["Prescription (Rx)"] + _table_lines(summary.prescription_table) + [""]
    if summary.treatments_advised:
        lines += _section("Treatments Advised", summary.treatments_advised)
    if summary.additional_notes:
        lines += _section("Additional Notes", summary.additional_notes)

    if summary.follow_up_date:
        lines += [f"Follow-up: {summary.follow_up_date}", ""]

    lines += ["", "_" * 24, clinic.doctor_name or "Doctor's Signature"]
    return "\n".join(lines) + "\n"
