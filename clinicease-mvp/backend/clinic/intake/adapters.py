"""
具体 Adapter 实现。

新增表单来源：在此文件添加一个类，然后在 factory.py 注册即可。

已注册来源：
  general: GeneralOpdAdapter  (普通门诊表单，vitals 平铺在顶层，有 treatmentsAdvised)
  dental : DentalOpdAdapter   (牙科门诊表单，vitals 嵌套，有 toothNotes / radiographs)
"""

from ..dental.chart import set_note
from ..opd.text import normalize_gender
from ..opd.types import OpdFormInput, RadiographEntry, TreatmentEntry, VitalsRecord
from .base import BaseIntakeAdapter, flag, items, text

VITAL_KEYS = ("height", "weight", "bp", "pulse", "spo2", "temp")


def _common_fields(raw: dict) -> dict:
    """两种表单共有的患者信息 + 临床文本字段。"""
    return dict(
        patient_id=text(raw, "patientId"),
        patient_name=text(raw, "patientName"),
        patient_age=text(raw, "patientAge"),
        patient_gender=normalize_gender(text(raw, "patientGender")),
        patient_contact=text(raw, "patientContact"),
        patient_address=text(raw, "patientAddress"),
        govt_id=text(raw, "govtId"),
        chief_complaint=text(raw, "chiefComplaint"),
        examination_findings=text(raw, "examinationFindings"),
        medical_history=text(raw, "medicalHistory"),
        provisional_diagnosis=text(raw, "provisionalDiagnosis"),
        is_final_diagnosis=flag(raw, "isFinalDiagnosis"),
        additional_notes=text(raw, "additionalNotes"),
        follow_up_date=text(raw, "followUpDate"),
    )


# ── GeneralOpdAdapter ──────────────────────────────────────────────────────
#
# 外部格式示例（JSON）:
# {
#   "patientId": "CZ-123456", "patientName": "aarav patel", "patientAge": "45",
#   "patientGender": "male", "patientContact": "9876543210",
#   "height": "172", "weight": "70", "bp": "120/80",
#   "chiefComplaint": "fever since 3 days",
#   "provisionalDiagnosis": "viral fever", "isFinalDiagnosis": false,
#   "medicines": [{"name": "paracetamol", "dosageValue": "500", ...}],
#   "testsAdvised": [{"value": "CBC"}],
#   "treatmentsAdvised": [{"value": "Steam inhalation"}],
#   "followUpDate": "After 1 week"
# }

class GeneralOpdAdapter(BaseIntakeAdapter):
    source = "general"

    def transform(self) -> OpdFormInput:
        raw = self._parsed

        return OpdFormInput(
            **_common_fields(raw),
            vitals=VitalsRecord(**{key: text(raw, key) for key in VITAL_KEYS}),
            medicines=self._medicines(),
            tests=self._tests(),
            treatments=tuple(
                TreatmentEntry(value=text(t, "value")) for t in items(raw, "treatmentsAdvised")
            ),
            source=self.source,
        )


# ── DentalOpdAdapter ───────────────────────────────────────────────────────
#
# 外部格式示例（JSON）:
# {
#   "patientName": "priya singh", "patientAge": "32",
#   "vitals": {"bp": "118/76", "pulse": "72"},
#   "chiefComplaint": "pain in lower left tooth",
#   "provisionalDiagnosis": "irreversible pulpitis",
#   "toothNotes": [{"tooth": "LL6", "note": "Decayed"}, {"tooth": "UR8", "note": "impacted"}],
#   "radiographs": [{"type": "IOPA", "toothNumber": "36"}, {"type": "OPG"}],
#   "medicines": [...],
#   "testsAdvised": [{"value": "RBS"}]
# }
#
# 与 general 的主要差异：
#   1. vitals 嵌套在 "vitals" 对象里
#   2. toothNotes 可以是 [{tooth, note}] 列表，也可以是 {tooth: note} 对象
#      同一颗牙出现多次 → 后写覆盖；note 为空 → 删除
#   3. radiographs 列表，toothNumber 可选

class DentalOpdAdapter(BaseIntakeAdapter):
    source = "dental"

    def _tooth_notes(self) -> dict:
        raw_notes = self._parsed.get("toothNotes") or []
        if isinstance(raw_notes, dict):
            pairs = [(str(k).strip(), str(v or "").strip()) for k, v in raw_notes.items()]
        else:
            pairs = [(text(n, "tooth"), text(n, "note")) for n in items(self._parsed, "toothNotes")]

        notes: dict = {}
        for tooth, note in pairs:
            notes = set_note(notes, tooth, note)
        return notes

    def transform(self) -> OpdFormInput:
        raw = self._parsed
        vitals = raw.get("vitals") if isinstance(raw.get("vitals"), dict) else {}

        return OpdFormInput(
            **_common_fields(raw),
            vitals=VitalsRecord(**{key: text(vitals, key) for key in VITAL_KEYS}),
            tooth_notes=self._tooth_notes(),
            medicines=self._medicines(),
            radiographs=tuple(
                RadiographEntry(type=text(r, "type"), tooth_number=text(r, "toothNumber"))
                for r in items(raw, "radiographs")
            ),
            tests=self._tests(),
            source=self.source,
        )
