"""
OPD 表单输入 / 汇总输出的标准结构。

所有 intake adapter 的 transform() 必须返回 OpdFormInput。
builder 只消费 OpdFormInput，只产出 OpdSummary，永远不碰 HTTP 原始数据。
两者都是 frozen dataclass：builder 不修改输入，汇总生成后也不再变。
"""

from dataclasses import dataclass, field, fields
from typing import Optional

DOSAGE_UNITS = ("mg", "mcg", "g", "ml", "tsp", "tbsp", "IU", "drops")
FREQUENCY_UNITS = ("daily", "weekly", "monthly")
DURATION_UNITS = ("Days", "Weeks", "Months", "Year(s)")
RADIOGRAPH_TYPES = ("OPG", "IOPA", "CBCT", "Bitewing")
GENDERS = ("Male", "Female", "Other")


@dataclass(frozen=True)
class MedicineEntry:
    name: str = ""
    dosage_value: str = ""
    dosage_unit: str = "mg"
    frequency_value: str = ""
    frequency_unit: str = "daily"
    duration_value: str = ""
    duration_unit: str = "Days"
    instructions: str = ""

    @property
    def is_active(self) -> bool:
        return bool(self.name.strip())


@dataclass(frozen=True)
class RadiographEntry:
    type: str = ""
    tooth_number: str = ""

    @property
    def is_active(self) -> bool:
        return bool(self.type)


@dataclass(frozen=True)
class TestEntry:
    __test__ = False  # 不是 pytest 用例

    value: str = ""

    @property
    def is_active(self) -> bool:
        return bool(self.value.strip())


@dataclass(frozen=True)
class TreatmentEntry:
    value: str = ""

    @property
    def is_active(self) -> bool:
        return bool(self.value.strip())


@dataclass(frozen=True)
class VitalsRecord:
    height: str = ""
    weight: str = ""
    bp: str = ""
    pulse: str = ""
    spo2: str = ""
    temp: str = ""

    @property
    def is_present(self) -> bool:
        return any(getattr(self, f.name) for f in fields(self))

    def as_dict(self) -> dict:
        """只输出非空字段。"""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name)}


@dataclass(frozen=True)
class OpdFormInput:
    """
    一次 OPD 表单提交的完整快照。

    patient_id   已有患者时由外部传入，新患者在打开表单时生成（CZ-xxxxxx），可为空。
    tooth_notes  {tooth_id: note}，无序。
    medicines / radiographs / tests / treatments  保持用户添加顺序。
    source       标识表单来源（"general" / "dental"）。
    """

    patient_name: str
    patient_age: str
    provisional_diagnosis: str
    patient_id: str = ""
    patient_gender: str = ""
    patient_contact: str = ""
    patient_address: str = ""
    govt_id: str = ""
    chief_complaint: str = ""
    examination_findings: str = ""
    medical_history: str = ""
    additional_notes: str = ""
    follow_up_date: str = ""
    is_final_diagnosis: bool = False
    vitals: VitalsRecord = field(default_factory=VitalsRecord)
    tooth_notes: dict = field(default_factory=dict)
    medicines: tuple = ()
    radiographs: tuple = ()
    tests: tuple = ()
    treatments: tuple = ()
    source: str = ""


@dataclass(frozen=True)
class PatientDetails:
    name: str
    age: str
    id: Optional[str] = None
    gender: Optional[str] = None
    contact: Optional[str] = None
    address: Optional[str] = None
    govt_id: Optional[str] = None


@dataclass(frozen=True)
class OpdSummary:
    """
    规范化后的 OPD 汇总。

    可选字段为 None 表示「用户没填」，绝不用空字符串表示缺失。
    prescription_table 是管道符分隔的 markdown 表格，打印端按行 / 按 | 拆分。
    """

    patient: PatientDetails
    diagnosis_label: str
    diagnosis: str
    vitals: Optional[VitalsRecord] = None
    chief_complaint: Optional[str] = None
    examination_findings: Optional[str] = None
    medical_history: Optional[str] = None
    tooth_notes: Optional[str] = None
    radiographs: Optional[str] = None
    tests_advised: Optional[str] = None
    treatments_advised: Optional[str] = None
    prescription_table: Optional[str] = None
    additional_notes: Optional[str] = None
    follow_up_date: Optional[str] = None
