from practice_comp.config.loaders import get_default_config, load_engine_config
from practice_comp.projections.engine import build_scenario
from practice_comp.projections.runner import compare_scenarios, run_projection

__all__ = ['build_scenario', 'compare_scenarios', 'get_default_config', 'load_engine_config', 'run_projection']
