# practice_comp/state/schema.py
# flake8: noqa
"""Centralized column constants for compensation and projection tables.

This module defines:
  - Identifier columns shared by every table
  - Per-physician compensation columns
  - Per-year financial row columns and the projected fields they map to
  - Payroll tax breakdown columns

All reporting code should import from here for consistency.
"""
from __future__ import annotations

from typing import Dict, List

# Core identifier columns
YEAR = "year"
PHYSICIAN_ID = "physician_id"
PHYSICIAN_NAME = "physician_name"
PHYSICIAN_TYPE = "physician_type"
SCENARIO = "scenario"

# -----------------------------------------------------------------------------
# Per-physician compensation columns
# -----------------------------------------------------------------------------
EMPLOYEE_PORTION = "employee_portion"
PARTNER_PORTION = "partner_portion"
BASE_SHARE = "base_share"
MD_SHARE = "md_share"
PRCS_SHARE = "prcs_share"
ADDITIONAL_DAYS = "additional_days_pay"
BUYOUT = "buyout"
TRAILING_MD = "trailing_shared_md"
PARTNER_COMP = "partner_compensation"
W2_WAGES = "w2_wages"
PAYROLL_TAXES = "payroll_taxes"
BENEFITS = "benefits"
BONUS = "bonus"
TOTAL_INCOME = "total_income"

COMPENSATION_COLUMNS: List[str] = [
    YEAR,
    PHYSICIAN_ID,
    PHYSICIAN_NAME,
    PHYSICIAN_TYPE,
    EMPLOYEE_PORTION,
    PARTNER_PORTION,
    BASE_SHARE,
    MD_SHARE,
    PRCS_SHARE,
    ADDITIONAL_DAYS,
    BUYOUT,
    TRAILING_MD,
    PARTNER_COMP,
    W2_WAGES,
    PAYROLL_TAXES,
    BENEFITS,
    BONUS,
    TOTAL_INCOME,
]

# -----------------------------------------------------------------------------
# Per-year financial row columns
# -----------------------------------------------------------------------------
THERAPY_INCOME = "therapy_income"
NON_EMPLOYMENT_COSTS = "non_employment_costs"
NON_MD_EMPLOYMENT_COSTS = "non_md_employment_costs"
LOCUM_COSTS = "locum_costs"
MISC_EMPLOYMENT_COSTS = "misc_employment_costs"
MEDICAL_DIRECTOR_HOURS = "medical_director_hours"
PRCS_MEDICAL_DIRECTOR_HOURS = "prcs_medical_director_hours"
CONSULTING_SERVICES = "consulting_services_agreement"
GROSS_INCOME = "gross_income"
EMPLOYEE_COSTS = "employee_costs"
NET_POOL = "net_partner_pool"
UNDISTRIBUTED = "undistributed_income"

YEAR_COLUMNS: List[str] = [
    YEAR,
    THERAPY_INCOME,
    NON_EMPLOYMENT_COSTS,
    NON_MD_EMPLOYMENT_COSTS,
    LOCUM_COSTS,
    MISC_EMPLOYMENT_COSTS,
    MEDICAL_DIRECTOR_HOURS,
    PRCS_MEDICAL_DIRECTOR_HOURS,
    CONSULTING_SERVICES,
    GROSS_INCOME,
    EMPLOYEE_COSTS,
    NET_POOL,
    UNDISTRIBUTED,
]

# Suffix of the boolean column that flags a caller-supplied projected value
OVERRIDDEN_SUFFIX = "_overridden"

# -----------------------------------------------------------------------------
# Payroll tax breakdown columns
# -----------------------------------------------------------------------------
TAX_REGIME = "tax_regime"
TAX_AMOUNT = "tax_amount"

TAX_COLUMNS: List[str] = [YEAR, PHYSICIAN_ID, TAX_REGIME, TAX_AMOUNT]

# Dtypes for numeric compensation columns
COMPENSATION_DTYPES: Dict[str, str] = {
    col: "float64"
    for col in COMPENSATION_COLUMNS
    if col not in (YEAR, PHYSICIAN_ID, PHYSICIAN_NAME, PHYSICIAN_TYPE)
}
COMPENSATION_DTYPES[YEAR] = "int64"
