# practice_comp/reporting/metrics.py
"""
Functions to summarise projection results into report-ready DataFrames.
"""

import logging
from typing import Optional

import numpy as np
import pandas as pd

from practice_comp.config.models import EngineConfig
from practice_comp.projections.runner import ProjectionResult, get_total_income
from practice_comp.state import schema

logger = logging.getLogger(__name__)


def compensation_summary(result: ProjectionResult, value_column: str = schema.TOTAL_INCOME) -> pd.DataFrame:
    """
    Pivot per-physician compensation into one row per physician, one column per year.

    Args:
        result: Output of :func:`practice_comp.projections.runner.run_projection`.
        value_column: Compensation column to report (total income by default).

    Returns:
        DataFrame indexed by physician name with a ``total`` column appended.
    """
    frame = result.compensation_frame()
    if frame.empty:
        logger.warning(f"No compensation rows for scenario {result.scenario.name!r}; returning empty summary.")
        return pd.DataFrame()
    if value_column not in frame.columns:
        raise KeyError(f"Unknown compensation column: {value_column!r}")

    summary = frame.pivot_table(
        index=schema.PHYSICIAN_NAME,
        columns=schema.YEAR,
        values=value_column,
        aggfunc="sum",
        fill_value=0.0,
    )
    summary["total"] = summary.sum(axis=1)
    logger.debug(f"Compensation summary for {result.scenario.name!r}: {summary.shape}")
    return summary


def financial_summary(result: ProjectionResult) -> pd.DataFrame:
    """Income, cost and pool figures per projected year, indexed by year."""
    frame = result.year_frame()
    if frame.empty:
        return frame
    frame = frame.set_index(schema.YEAR)
    frame["total_costs"] = [
        comp.total_costs if comp is not None else np.nan
        for comp in (result.for_year(y) for y in frame.index)
    ]
    frame["pool_margin_pct"] = np.where(
        frame[schema.GROSS_INCOME].astype(float) != 0,
        frame[schema.NET_POOL].astype(float) / frame[schema.GROSS_INCOME].astype(float) * 100,
        0.0,
    )
    return frame


def historic_frame(config: EngineConfig, through_year: Optional[int] = None) -> pd.DataFrame:
    """
    Recorded financial rows as a DataFrame, with a computed total income column.

    Args:
        config: Engine configuration holding the historic rows.
        through_year: Last year to include; all years when None.
    """
    rows = []
    for row in sorted(config.historic_data, key=lambda r: r.year):
        if through_year is not None and row.year > through_year:
            continue
        record = row.model_dump(exclude={"description"})
        record[schema.GROSS_INCOME] = get_total_income(row, config)
        rows.append(record)
    if not rows:
        return pd.DataFrame(columns=[schema.YEAR, schema.GROSS_INCOME])
    return pd.DataFrame(rows).set_index(schema.YEAR)


def payroll_tax_frame(result: ProjectionResult) -> pd.DataFrame:
    """Employer payroll tax per physician, year and regime (long format)."""
    rows = [
        {
            schema.YEAR: comp.year,
            schema.PHYSICIAN_ID: p.physician_id,
            schema.TAX_REGIME: regime,
            schema.TAX_AMOUNT: amount,
        }
        for comp in result.years
        for p in comp.physicians
        for regime, amount in p.tax_components.items()
    ]
    return pd.DataFrame(rows, columns=schema.TAX_COLUMNS)
