# practice_comp/config/__init__.py

from .loaders import (
    ConfigLoadError,
    get_default_config,
    load_engine_config,
    load_yaml_config,
)
from .models import (
    BenefitsConfig,
    EngineConfig,
    MedicalDirectorConfig,
    PayrollTaxConfig,
    PayScheduleConfig,
    StaffMember,
    TaxRegime,
    ToleranceConfig,
)

__all__ = [
    "BenefitsConfig",
    "ConfigLoadError",
    "EngineConfig",
    "MedicalDirectorConfig",
    "PayrollTaxConfig",
    "PayScheduleConfig",
    "StaffMember",
    "TaxRegime",
    "ToleranceConfig",
    "get_default_config",
    "load_engine_config",
    "load_yaml_config",
]
