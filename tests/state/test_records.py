import pytest

from practice_comp.exceptions import UnknownPhysicianTypeError
from practice_comp.state.records import FutureYear, Projection, Scenario
from practice_comp.utils.status_enums import BaselineMode, FieldState


def test_future_year_defaults_to_derived():
    fy = FutureYear(year=2026)
    assert fy.field_state("therapy_income") is FieldState.DERIVED
    assert not fy.is_overridden("therapy_income")


def test_prcs_designation_unset_vs_cleared():
    assert not FutureYear(year=2026).prcs_designation_cleared
    assert FutureYear(year=2026, prcs_director_physician_id=None).prcs_designation_cleared
    assert not FutureYear(year=2026, prcs_director_physician_id="js").prcs_designation_cleared


def test_future_year_parses_camel_case_roster():
    fy = FutureYear.model_validate(
        {
            "year": 2026,
            "therapyIncome": 1_000_000,
            "physicians": [{"id": "js", "name": "JS", "type": "partner"}],
            "fieldStates": {"therapy_income": "overridden"},
        }
    )
    assert fy.therapy_income == 1_000_000
    assert fy.physicians[0].type == "partner"
    assert fy.is_overridden("therapy_income")


def test_future_year_rejects_unknown_physician_type():
    with pytest.raises(UnknownPhysicianTypeError):
        FutureYear(year=2026, physicians=[{"id": "x", "name": "X", "type": "intern"}])


def test_scenario_defaults():
    scenario = Scenario(name="A", future=[FutureYear(year=2026), FutureYear(year=2027)])
    assert scenario.data_mode is BaselineMode.CURRENT_YEAR_DATA
    assert scenario.projection == Projection()
    assert scenario.year(2027).year == 2027
    assert scenario.year(2040) is None
