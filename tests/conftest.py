import pytest

from practice_comp.config.loaders import get_default_config
from practice_comp.engines.md_hours import allocate_medical_director_hours
from practice_comp.state.physician import (
    EmployeePhysician,
    EmployeeToPartnerPhysician,
    PartnerPhysician,
)


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: runs several full multi-year projections")


@pytest.fixture
def config():
    # Shared across tests; use model_copy(update=...) for variations
    return get_default_config()


@pytest.fixture
def pay_schedule_config(config):
    schedule = config.pay_schedule.model_copy(update={"enabled": True})
    return config.model_copy(update={"pay_schedule": schedule})


@pytest.fixture
def js_partner():
    return PartnerPhysician(id="js", name="JS")


@pytest.fixture
def mc_employee_to_partner():
    return EmployeeToPartnerPhysician(
        id="mc", name="MC", salary=180_000.0, employee_portion_of_year=0.5
    )


@pytest.fixture
def js_mc_roster(js_partner, mc_employee_to_partner):
    return allocate_medical_director_hours([js_partner, mc_employee_to_partner])


@pytest.fixture
def staff_employee():
    return EmployeePhysician(id="ew", name="EW", salary=200_000.0, receives_benefits=True)
