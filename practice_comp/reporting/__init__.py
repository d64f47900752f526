# practice_comp/reporting/__init__.py

from .metrics import compensation_summary, financial_summary, historic_frame, payroll_tax_frame

__all__ = ["compensation_summary", "financial_summary", "historic_frame", "payroll_tax_frame"]
