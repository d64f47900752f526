# practice_comp/projections/snapshot.py
"""
Scenario snapshots: lossless camelCase JSON round trips and tolerance-based
dirty detection against a previously loaded snapshot.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from logging_config import ERROR_LOGGER
from practice_comp.config.models import EngineConfig, ToleranceConfig
from practice_comp.exceptions import PracticeModelError, SnapshotError
from practice_comp.projections.baseline import normalize_baseline_mode
from practice_comp.projections.engine import PROJECTED_FIELDS
from practice_comp.projections.settings import changed_projection_fields
from practice_comp.state.records import FutureYear, Scenario
from practice_comp.state.roster import rosters_equivalent

logger = logging.getLogger(__name__)
err_logger = logging.getLogger(ERROR_LOGGER)

SNAPSHOT_VERSION = 1


def _dump_future_year(fy: FutureYear) -> Dict[str, Any]:
    data = fy.model_dump(mode="json", by_alias=True)
    # An unset designation must stay unset, or it would reload as "nobody"
    if "prcs_director_physician_id" not in fy.model_fields_set:
        data.pop("prcsDirectorPhysicianId", None)
    return data


def scenario_to_snapshot(scenario: Scenario) -> Dict[str, Any]:
    data = scenario.model_dump(mode="json", by_alias=True, exclude={"future", "custom_baseline"})
    data["future"] = [_dump_future_year(fy) for fy in scenario.future]
    data["customBaseline"] = (
        _dump_future_year(scenario.custom_baseline) if scenario.custom_baseline is not None else None
    )
    return data


def scenario_from_snapshot(data: Dict[str, Any], baseline_year: int) -> Scenario:
    """
    Rebuild a scenario from :func:`scenario_to_snapshot` output.

    Year-named legacy data modes are normalized against ``baseline_year``.

    Raises:
        SnapshotError: if the data does not describe a valid scenario.
    """
    if not isinstance(data, dict):
        raise SnapshotError(f"Scenario snapshot must be a mapping, got {type(data).__name__}")
    payload = dict(data)
    mode_key = "dataMode" if "dataMode" in payload else "data_mode"
    try:
        if mode_key in payload:
            payload[mode_key] = normalize_baseline_mode(payload[mode_key], baseline_year)
        return Scenario.model_validate(payload)
    except (ValidationError, ValueError, PracticeModelError) as e:
        err_logger.error(f"Could not load scenario snapshot {data.get('name')!r}: {e}")
        raise SnapshotError(f"Invalid scenario snapshot: {e}") from e


def workspace_to_snapshot(scenario_a: Scenario, scenario_b: Optional[Scenario] = None) -> Dict[str, Any]:
    """Snapshot of the A scenario and, when enabled, the B scenario."""
    return {
        "version": SNAPSHOT_VERSION,
        "scenarioA": scenario_to_snapshot(scenario_a),
        "scenarioBEnabled": scenario_b is not None,
        "scenarioB": scenario_to_snapshot(scenario_b) if scenario_b is not None else None,
    }


def workspace_from_snapshot(
    data: Dict[str, Any], baseline_year: int
) -> Tuple[Scenario, Optional[Scenario]]:
    if "scenarioA" not in data:
        raise SnapshotError("Snapshot has no scenarioA")
    scenario_a = scenario_from_snapshot(data["scenarioA"], baseline_year)
    scenario_b = None
    if data.get("scenarioBEnabled") and data.get("scenarioB"):
        scenario_b = scenario_from_snapshot(data["scenarioB"], baseline_year)
    return scenario_a, scenario_b


def dumps_snapshot(scenario_a: Scenario, scenario_b: Optional[Scenario] = None, indent: int = 2) -> str:
    return json.dumps(workspace_to_snapshot(scenario_a, scenario_b), indent=indent)


def loads_snapshot(text: str, baseline_year: int) -> Tuple[Scenario, Optional[Scenario]]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        err_logger.error(f"Snapshot is not valid JSON: {e}")
        raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object")
    return workspace_from_snapshot(data, baseline_year)


# --- Dirty detection ----------------------------------------------------------


def _year_dirty(current: FutureYear, saved: FutureYear, tolerances: ToleranceConfig) -> bool:
    for name in PROJECTED_FIELDS:
        a, b = getattr(current, name), getattr(saved, name)
        if (a is None) != (b is None):
            return True
        if a is not None and abs(a - b) > tolerances.change_threshold:
            return True
    if current.prcs_director_physician_id != saved.prcs_director_physician_id:
        return True
    if current.prcs_designation_cleared != saved.prcs_designation_cleared:
        return True
    return not rosters_equivalent(
        current.physicians, saved.physicians, tolerances.floating_point_tolerance
    )


def dirty_years(current: Scenario, saved: Scenario, tolerances: ToleranceConfig) -> List[int]:
    """Years whose values or roster differ from the saved scenario."""
    saved_by_year = {fy.year: fy for fy in saved.future}
    result = []
    for fy in current.future:
        other = saved_by_year.get(fy.year)
        if other is None or _year_dirty(fy, other, tolerances):
            result.append(fy.year)
    result.extend(y for y in saved_by_year if y not in {fy.year for fy in current.future})
    return sorted(result)


def is_scenario_dirty(current: Scenario, saved: Scenario, config: EngineConfig) -> bool:
    """
    True when ``current`` has changed relative to the loaded snapshot.

    Dollar fields are compared with the change threshold, percentages and
    portions with the floating point tolerance.
    """
    tolerances = config.tolerances
    if current.data_mode is not saved.data_mode:
        return True
    changed = changed_projection_fields(current.projection, saved.projection, tolerances)
    if changed:
        logger.debug(f"[{current.name}] projection settings changed: {changed}")
        return True
    years = dirty_years(current, saved, tolerances)
    if years:
        logger.debug(f"[{current.name}] changed years: {years}")
        return True
    return False
