import pytest

from practice_comp.engines.employee_costs import compute_default_non_md_employment_costs
from practice_comp.exceptions import BaselineNotFoundError, UnknownFieldError
from practice_comp.projections.engine import (
    PROJECTED_FIELDS,
    build_scenario,
    field_differs_from_derived,
    field_states,
    infer_field_states,
    is_field_overridden,
    reset_all,
    reset_field,
    reset_year,
    set_data_mode,
    set_future_value,
    set_prcs_director,
    set_projection,
    set_roster,
)
from practice_comp.state.physician import PartnerPhysician
from practice_comp.state.records import FutureYear
from practice_comp.utils.status_enums import BaselineMode, FieldState

BASE_THERAPY_2025 = 3_164_007.0


@pytest.fixture
def scenario(config, js_mc_roster):
    years = range(config.baseline_year + 1, config.baseline_year + config.projection_years + 1)
    return build_scenario(config, rosters={y: js_mc_roster for y in years})


def test_build_creates_derived_years(config, scenario):
    assert [fy.year for fy in scenario.future] == [2026, 2027, 2028, 2029, 2030]
    assert scenario.data_mode is BaselineMode.CURRENT_YEAR_DATA
    assert scenario.selected_year == 2026
    states = field_states(scenario)
    assert all(state is FieldState.DERIVED for year in states.values() for state in year.values())
    assert set(states[2026]) == set(PROJECTED_FIELDS)


def test_growth_fields_compound(config, scenario):
    for n, fy in enumerate(scenario.future, start=1):
        assert fy.therapy_income == pytest.approx(BASE_THERAPY_2025 * 1.037 ** n)
        assert fy.non_employment_costs == pytest.approx(229_714.0 * 1.057 ** n)
        assert fy.misc_employment_costs == pytest.approx(29_115.51 * 1.032 ** n)

    staff = compute_default_non_md_employment_costs(2025, config)
    assert scenario.future[0].non_md_employment_costs == pytest.approx(staff * 1.024)


def test_fixed_fields_carry_configured_amounts(scenario):
    for fy in scenario.future:
        assert fy.medical_director_hours == 97_200.0
        assert fy.prcs_medical_director_hours == 50_000.0
        assert fy.consulting_services_agreement == 17_030.0
        assert fy.locum_costs == 120_000.0


def test_override_feeds_following_years(config, scenario):
    updated = set_future_value(scenario, 2027, "therapy_income", 4_000_000.0, config)
    assert updated.year(2027).therapy_income == 4_000_000.0
    assert is_field_overridden(updated, 2027, "therapy_income")
    assert updated.year(2026).therapy_income == pytest.approx(scenario.year(2026).therapy_income)
    assert updated.year(2028).therapy_income == pytest.approx(4_000_000.0 * 1.037)
    assert updated.year(2030).therapy_income == pytest.approx(4_000_000.0 * 1.037 ** 3)
    # The input scenario is unchanged
    assert not is_field_overridden(scenario, 2027, "therapy_income")


def test_fixed_field_override_carries_forward(config, scenario):
    updated = set_future_value(scenario, 2027, "medical_director_hours", 110_000.0, config)
    assert updated.year(2026).medical_director_hours == 97_200.0
    assert [updated.year(y).medical_director_hours for y in (2027, 2028, 2030)] == [110_000.0] * 3


def test_reset_field_restores_derived_value(config, scenario):
    overridden = set_future_value(scenario, 2027, "therapy_income", 4_000_000.0, config)
    restored = reset_field(overridden, 2027, "therapy_income", config)
    assert not is_field_overridden(restored, 2027, "therapy_income")
    for before, after in zip(scenario.future, restored.future):
        assert after.therapy_income == pytest.approx(before.therapy_income)


def test_reset_year_and_reset_all(config, scenario):
    edited = set_future_value(scenario, 2027, "therapy_income", 4_000_000.0, config)
    edited = set_future_value(edited, 2027, "locum_costs", 0.0, config)
    edited = set_future_value(edited, 2029, "locum_costs", 0.0, config)

    one_year = reset_year(edited, 2027, config)
    assert not one_year.year(2027).field_states
    assert is_field_overridden(one_year, 2029, "locum_costs")

    everything = reset_all(edited, config)
    assert all(not fy.field_states for fy in everything.future)
    assert everything.year(2029).locum_costs == 120_000.0


def test_unknown_field_and_year(config, scenario):
    with pytest.raises(UnknownFieldError):
        set_future_value(scenario, 2027, "parking_income", 1.0, config)
    with pytest.raises(KeyError):
        reset_field(scenario, 2027, "parking_income", config)
    with pytest.raises(ValueError):
        set_future_value(scenario, 2040, "therapy_income", 1.0, config)


def test_projection_setting_is_clamped_and_applied(config, scenario):
    updated = set_projection(scenario, "income_growth_pct", 50.0, config)
    assert updated.projection.income_growth_pct == 10.0
    assert updated.year(2026).therapy_income == pytest.approx(BASE_THERAPY_2025 * 1.10)


def test_projection_setting_keeps_overrides(config, scenario):
    edited = set_future_value(scenario, 2026, "therapy_income", 3_500_000.0, config)
    updated = set_projection(edited, "income_growth_pct", 0.0, config)
    assert updated.year(2026).therapy_income == 3_500_000.0
    assert updated.year(2027).therapy_income == pytest.approx(3_500_000.0)


def test_prior_year_baseline(config, scenario):
    prior = set_data_mode(scenario, BaselineMode.PRIOR_YEAR_DATA, config)
    first = prior.year(2026)
    assert first.therapy_income == pytest.approx(2_934_700.0 * 1.037)
    assert first.non_md_employment_costs == pytest.approx(157_986.94 * 1.024)
    assert first.misc_employment_costs == pytest.approx(48_446.0 * 1.032)


def test_legacy_mode_name(config):
    scenario = build_scenario(config, data_mode="2024 Data")
    assert scenario.data_mode is BaselineMode.PRIOR_YEAR_DATA


def test_custom_baseline(config, scenario):
    with pytest.raises(BaselineNotFoundError):
        set_data_mode(scenario, BaselineMode.CUSTOM, config)

    custom = FutureYear(year=2025, therapy_income=1_000_000.0, non_employment_costs=100_000.0)
    updated = set_data_mode(scenario, BaselineMode.CUSTOM, config, custom_baseline=custom)
    assert updated.year(2026).therapy_income == pytest.approx(1_037_000.0)
    assert updated.year(2026).non_employment_costs == pytest.approx(105_700.0)


def test_scenario_b_defaults(config):
    scenario_b = build_scenario(config, name="B")
    assert scenario_b.projection.income_growth_pct == 0.0
    assert scenario_b.year(2030).therapy_income == pytest.approx(BASE_THERAPY_2025)
    assert scenario_b.year(2030).locum_costs == 0.0


def test_set_roster_reallocates_md_hours(scenario):
    updated = set_roster(
        scenario, 2028, [PartnerPhysician(id="a", name="A"), PartnerPhysician(id="b", name="B")]
    )
    assert [p.medical_director_hours_percentage for p in updated.year(2028).physicians] == [50.0, 50.0]
    assert len(updated.year(2027).physicians) == 2
    assert updated.year(2027).physicians[0].id == "js"


def test_set_prcs_director(scenario):
    cleared = set_prcs_director(scenario, 2026, None)
    assert cleared.year(2026).prcs_designation_cleared
    assert not cleared.year(2027).prcs_designation_cleared
    assert set_prcs_director(scenario, 2026, "mc").year(2026).prcs_director_physician_id == "mc"


def test_infer_field_states_uses_change_threshold(config, scenario):
    def with_therapy(delta):
        future = [
            fy.model_copy(update={"therapy_income": fy.therapy_income + delta}) if fy.year == 2027 else fy
            for fy in scenario.future
        ]
        return scenario.model_copy(update={"future": future})

    small = infer_field_states(with_therapy(500.0), config)
    assert not is_field_overridden(small, 2027, "therapy_income")
    assert small.year(2027).therapy_income == pytest.approx(scenario.year(2027).therapy_income)

    large = infer_field_states(with_therapy(5_000.0), config)
    assert is_field_overridden(large, 2027, "therapy_income")
    assert large.year(2028).therapy_income == pytest.approx(
        (scenario.year(2027).therapy_income + 5_000.0) * 1.037
    )
    assert field_differs_from_derived(with_therapy(5_000.0), 2027, "therapy_income", config)
    assert not is_field_overridden(large, 2028, "therapy_income")
    assert not is_field_overridden(large, 2030, "therapy_income")


def test_infer_field_states_keeps_years_derived_from_an_edit(config, scenario):
    edited = set_future_value(scenario, 2027, "therapy_income", 3_700_000.0, config)
    saved = edited.model_copy(
        update={"future": [fy.model_copy(update={"field_states": {}}) for fy in edited.future]}
    )
    inferred = infer_field_states(saved, config)

    overridden = {
        year: sorted(name for name, state in states.items() if state == FieldState.OVERRIDDEN)
        for year, states in field_states(inferred).items()
    }
    assert overridden == {2026: [], 2027: ["therapy_income"], 2028: [], 2029: [], 2030: []}
    assert inferred.year(2030).therapy_income == pytest.approx(edited.year(2030).therapy_income)
