from .builder import build_summary
from .validation import validate_opd_form

__all__ = ["build_summary", "validate_opd_form"]
