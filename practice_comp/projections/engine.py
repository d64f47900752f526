# practice_comp/projections/engine.py
"""
Projection engine: derives each projected year's financial fields from the
baseline and the scenario's assumptions, honouring per-field overrides.

Every projected field of every year is either DERIVED or OVERRIDDEN:

* growth fields compound the previous year's resolved value by their growth
  percentage: ``previous * (1 + pct / 100)``;
* fixed-dollar fields carry the previous year's resolved value forward, with
  the first projected year taking the scenario's configured amount;
* an OVERRIDDEN field keeps its stored value and becomes the "previous year"
  value of the next year.

Years are always resolved in ascending order, so year N only ever reads a
year N-1 value that is already final. All functions return new scenarios.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from logging_config import PROJECTION_LOGGER
from practice_comp.config.models import EngineConfig
from practice_comp.engines.md_hours import allocate_medical_director_hours
from practice_comp.exceptions import UnknownFieldError
from practice_comp.projections.baseline import BaselineValues, normalize_baseline_mode, select_baseline
from practice_comp.projections.settings import set_projection_field
from practice_comp.state.physician import PhysicianBase, parse_roster
from practice_comp.state.records import FutureYear, Projection, Scenario
from practice_comp.utils.status_enums import BaselineMode, FieldState

logger = logging.getLogger(__name__)
proj_logger = logging.getLogger(PROJECTION_LOGGER)

# Projected field -> growth percentage setting that compounds it
GROWTH_FIELDS: Dict[str, str] = {
    "therapy_income": "income_growth_pct",
    "non_employment_costs": "non_employment_costs_pct",
    "non_md_employment_costs": "non_md_employment_costs_pct",
    "misc_employment_costs": "misc_employment_costs_pct",
}

# Projected field -> fixed-dollar setting that seeds it
FIXED_FIELDS: Dict[str, str] = {
    "medical_director_hours": "medical_director_hours",
    "prcs_medical_director_hours": "prcs_medical_director_hours",
    "consulting_services_agreement": "consulting_services_agreement",
    "locum_costs": "locums_costs",
}

PROJECTED_FIELDS = tuple(GROWTH_FIELDS) + tuple(FIXED_FIELDS)


def _check_field(field_name: str) -> None:
    if field_name not in PROJECTED_FIELDS:
        raise UnknownFieldError(f"Unknown projected field: {field_name!r}")


def _year_index(scenario: Scenario, year: int) -> int:
    for idx, fy in enumerate(scenario.future):
        if fy.year == year:
            return idx
    raise ValueError(f"Scenario {scenario.name!r} has no projected year {year}")


def _ordered(future: Iterable[FutureYear]) -> List[FutureYear]:
    return sorted(future, key=lambda fy: fy.year)


def _stored(fy: FutureYear, field_name: str) -> Optional[float]:
    return getattr(fy, field_name)


def derive_next(field_name: str, previous: float, projection: Projection) -> float:
    """Value a field takes in the year after one whose resolved value is ``previous``."""
    if field_name in GROWTH_FIELDS:
        return previous * (1 + getattr(projection, GROWTH_FIELDS[field_name]) / 100)
    return previous


def _initial_previous(baseline: BaselineValues, projection: Projection) -> Dict[str, float]:
    previous = {name: baseline.get(name) for name in GROWTH_FIELDS}
    # Fixed fields "carry" the configured amount into the first projected year
    previous.update({name: getattr(projection, attr) for name, attr in FIXED_FIELDS.items()})
    return previous


def expected_values(
    scenario: Scenario,
    config: EngineConfig,
    baseline: Optional[BaselineValues] = None,
) -> Dict[int, Dict[str, float]]:
    """
    Growth-implied value of every projected field, per year.

    The expectation for year N is computed from year N-1's resolved value,
    which is the override where one exists.
    """
    baseline = baseline or select_baseline(scenario, config)
    projection = scenario.projection
    previous = _initial_previous(baseline, projection)

    result: Dict[int, Dict[str, float]] = {}
    for fy in _ordered(scenario.future):
        expected = {}
        for name in PROJECTED_FIELDS:
            expected[name] = derive_next(name, previous[name], projection)
            stored = _stored(fy, name)
            previous[name] = stored if fy.is_overridden(name) and stored is not None else expected[name]
        result[fy.year] = expected
    return result


def recompute(scenario: Scenario, config: EngineConfig) -> Scenario:
    """Re-derive every DERIVED field; OVERRIDDEN fields are left untouched."""
    baseline = select_baseline(scenario, config)
    expected = expected_values(scenario, config, baseline)
    future = []
    for fy in _ordered(scenario.future):
        updates = {
            name: value
            for name, value in expected[fy.year].items()
            if not fy.is_overridden(name)
        }
        future.append(fy.model_copy(update=updates))
    logger.debug(
        f"Recomputed scenario {scenario.name!r} from {baseline.source.value} "
        f"({baseline.year}) over {len(future)} years"
    )
    return scenario.model_copy(update={"future": future})


def build_scenario(
    config: EngineConfig,
    name: str = "A",
    rosters: Optional[Mapping[int, Sequence[Union[Mapping, PhysicianBase]]]] = None,
    projection: Optional[Projection] = None,
    data_mode: Union[str, BaselineMode] = BaselineMode.CURRENT_YEAR_DATA,
    custom_baseline: Optional[FutureYear] = None,
    allocate_md_hours: bool = True,
) -> Scenario:
    """
    Create a scenario with ``config.projection_years`` years after the baseline
    year, every field DERIVED.

    Args:
        config: Engine configuration.
        name: Scenario name; also selects the configured projection defaults.
        rosters: Roster per projected year. Years without an entry start empty.
        projection: Assumptions; defaults to the configured ones for ``name``.
        data_mode: Baseline source (legacy year-named modes are accepted).
        custom_baseline: Baseline row used with ``BaselineMode.CUSTOM``.
        allocate_md_hours: Assign MD-hours shares in proportion to partner time.
    """
    rosters = rosters or {}
    future = []
    for offset in range(1, config.projection_years + 1):
        year = config.baseline_year + offset
        roster = parse_roster(rosters.get(year, []))
        if allocate_md_hours:
            roster = allocate_medical_director_hours(roster)
        future.append(FutureYear(year=year, physicians=roster))

    scenario = Scenario(
        name=name,
        future=future,
        projection=projection or config.projection_for(name),
        data_mode=normalize_baseline_mode(data_mode, config.baseline_year),
        custom_baseline=custom_baseline,
        selected_year=future[0].year,
    )
    proj_logger.info(
        f"Built scenario {name!r}: years {future[0].year}-{future[-1].year}, "
        f"baseline {scenario.data_mode.value}"
    )
    return recompute(scenario, config)


def _replace_year(scenario: Scenario, fy: FutureYear) -> Scenario:
    idx = _year_index(scenario, fy.year)
    future = list(scenario.future)
    future[idx] = fy
    return scenario.model_copy(update={"future": future})


def set_future_value(
    scenario: Scenario,
    year: int,
    field_name: str,
    value: float,
    config: EngineConfig,
) -> Scenario:
    """
    Override one projected field and re-derive the years after it.

    Raises:
        UnknownFieldError: if ``field_name`` is not a projected field.
        ValueError: if ``year`` is not a projected year of the scenario.
    """
    _check_field(field_name)
    fy = scenario.future[_year_index(scenario, year)]
    states = {**fy.field_states, field_name: FieldState.OVERRIDDEN}
    updated = fy.model_copy(update={field_name: float(value), "field_states": states})
    proj_logger.info(f"[{scenario.name}] {year} {field_name} overridden to {value:,.2f}")
    return recompute(_replace_year(scenario, updated), config)


def reset_field(scenario: Scenario, year: int, field_name: str, config: EngineConfig) -> Scenario:
    """Return a field to DERIVED and recompute it from the growth assumptions."""
    _check_field(field_name)
    fy = scenario.future[_year_index(scenario, year)]
    states = {k: v for k, v in fy.field_states.items() if k != field_name}
    proj_logger.info(f"[{scenario.name}] {year} {field_name} reset to derived")
    return recompute(_replace_year(scenario, fy.model_copy(update={"field_states": states})), config)


def reset_year(scenario: Scenario, year: int, config: EngineConfig) -> Scenario:
    fy = scenario.future[_year_index(scenario, year)]
    proj_logger.info(f"[{scenario.name}] {year} all fields reset to derived")
    return recompute(_replace_year(scenario, fy.model_copy(update={"field_states": {}})), config)


def reset_all(scenario: Scenario, config: EngineConfig) -> Scenario:
    future = [fy.model_copy(update={"field_states": {}}) for fy in scenario.future]
    proj_logger.info(f"[{scenario.name}] every projected field reset to derived")
    return recompute(scenario.model_copy(update={"future": future}), config)


def is_field_overridden(scenario: Scenario, year: int, field_name: str) -> bool:
    _check_field(field_name)
    return scenario.future[_year_index(scenario, year)].is_overridden(field_name)


def field_states(scenario: Scenario) -> Dict[int, Dict[str, FieldState]]:
    """Resolution state of every projected field, per year."""
    return {
        fy.year: {name: fy.field_state(name) for name in PROJECTED_FIELDS}
        for fy in _ordered(scenario.future)
    }


# --- Assumption and roster edits ---------------------------------------------


def set_projection(scenario: Scenario, field_name: str, value: float, config: EngineConfig) -> Scenario:
    """Change one projection setting and re-derive every DERIVED field."""
    projection = set_projection_field(scenario.projection, field_name, value)
    proj_logger.info(
        f"[{scenario.name}] projection {field_name}: "
        f"{getattr(scenario.projection, field_name)} -> {getattr(projection, field_name)}"
    )
    return recompute(scenario.model_copy(update={"projection": projection}), config)


def set_data_mode(
    scenario: Scenario,
    data_mode: Union[str, BaselineMode],
    config: EngineConfig,
    custom_baseline: Optional[FutureYear] = None,
) -> Scenario:
    updates = {"data_mode": normalize_baseline_mode(data_mode, config.baseline_year)}
    if custom_baseline is not None:
        updates["custom_baseline"] = custom_baseline
    proj_logger.info(f"[{scenario.name}] baseline data mode -> {updates['data_mode'].value}")
    return recompute(scenario.model_copy(update=updates), config)


def set_roster(
    scenario: Scenario,
    year: int,
    physicians: Sequence[Union[Mapping, PhysicianBase]],
    reallocate_md_hours: bool = True,
) -> Scenario:
    """Replace a year's roster, optionally re-running the MD-hours allocation."""
    roster = parse_roster(physicians)
    if reallocate_md_hours:
        roster = allocate_medical_director_hours(roster)
    fy = scenario.future[_year_index(scenario, year)]
    return _replace_year(scenario, fy.model_copy(update={"physicians": roster}))


def set_prcs_director(scenario: Scenario, year: int, physician_id: Optional[str]) -> Scenario:
    """Designate the PRCS director for a year; ``None`` explicitly designates nobody."""
    fy = scenario.future[_year_index(scenario, year)]
    return _replace_year(scenario, fy.model_copy(update={"prcs_director_physician_id": physician_id}))


# --- Tolerance-based override detection ---------------------------------------


def _differs(stored: Optional[float], expected: float, tolerance: float) -> bool:
    return stored is not None and abs(stored - expected) > tolerance


def field_differs_from_derived(
    scenario: Scenario,
    year: int,
    field_name: str,
    config: EngineConfig,
) -> bool:
    """True when the stored value is further than the change threshold from its derivation."""
    _check_field(field_name)
    fy = scenario.future[_year_index(scenario, year)]
    expected = expected_values(scenario, config)[year][field_name]
    return _differs(_stored(fy, field_name), expected, config.tolerances.change_threshold)


def infer_field_states(scenario: Scenario, config: EngineConfig) -> Scenario:
    """
    Rebuild field states from stored values.

    A field is DERIVED when its stored value is within the change threshold of
    either its override-free value (baseline compounded N times) or the value
    derived from the previous year as inferred so far. Anything further away is
    marked OVERRIDDEN. Years after an edited year therefore stay DERIVED and
    are re-derived from the edit. Used for scenarios saved without explicit
    field states.
    """
    baseline = select_baseline(scenario, config)
    projection = scenario.projection
    tolerance = config.tolerances.change_threshold
    previous = _initial_previous(baseline, projection)
    untouched = dict(previous)

    future = []
    for fy in _ordered(scenario.future):
        states: Dict[str, FieldState] = {}
        for name in PROJECTED_FIELDS:
            chained = derive_next(name, previous[name], projection)
            untouched[name] = derive_next(name, untouched[name], projection)
            stored = _stored(fy, name)
            if _differs(stored, chained, tolerance) and _differs(stored, untouched[name], tolerance):
                states[name] = FieldState.OVERRIDDEN
                previous[name] = stored
            else:
                previous[name] = chained
        future.append(fy.model_copy(update={"field_states": states}))
        if states:
            logger.debug(f"[{scenario.name}] {fy.year}: inferred overrides {sorted(states)}")
    return recompute(scenario.model_copy(update={"future": future}), config)
