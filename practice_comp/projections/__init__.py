# practice_comp/projections/__init__.py

from .baseline import BaselineValues, normalize_baseline_mode, select_baseline
from .engine import (
    build_scenario,
    field_states,
    infer_field_states,
    is_field_overridden,
    recompute,
    reset_all,
    reset_field,
    reset_year,
    set_data_mode,
    set_future_value,
    set_prcs_director,
    set_projection,
    set_roster,
)
from .runner import ProjectionResult, compare_scenarios, get_total_income, run_projection
from .snapshot import dumps_snapshot, is_scenario_dirty, loads_snapshot

__all__ = [
    "BaselineValues",
    "ProjectionResult",
    "build_scenario",
    "compare_scenarios",
    "dumps_snapshot",
    "field_states",
    "get_total_income",
    "infer_field_states",
    "is_field_overridden",
    "is_scenario_dirty",
    "loads_snapshot",
    "normalize_baseline_mode",
    "recompute",
    "reset_all",
    "reset_field",
    "reset_year",
    "run_projection",
    "select_baseline",
    "set_data_mode",
    "set_future_value",
    "set_prcs_director",
    "set_projection",
    "set_roster",
]
