# practice_comp/engines/__init__.py

from .compensation import PhysicianCompensation, YearCompensation, calculate_year_compensation
from .employee_costs import EmployeeCost, calculate_employee_costs, calculate_employee_total_cost
from .md_hours import allocate_medical_director_hours, md_percentages_valid
from .payroll_tax import PayrollTaxBreakdown, calculate_employer_payroll_taxes
from .w2 import W2Wages, calculate_w2_wages

__all__ = [
    "EmployeeCost",
    "PayrollTaxBreakdown",
    "PhysicianCompensation",
    "W2Wages",
    "YearCompensation",
    "allocate_medical_director_hours",
    "calculate_employee_costs",
    "calculate_employee_total_cost",
    "calculate_employer_payroll_taxes",
    "calculate_w2_wages",
    "calculate_year_compensation",
    "md_percentages_valid",
]
