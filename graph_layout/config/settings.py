"""
Diagnostic switches for the layout engines.

Each switch decides whether a degraded element (a broken cycle, an edge with
no resolvable route) is logged at WARNING or at DEBUG. Geometry and
``LayoutResult.warnings`` are the same whatever the switches say.

Environment Variables:
    GRAPH_LAYOUT_WARN_ON_CYCLES=true/false          - Log broken cycles at WARNING
    GRAPH_LAYOUT_WARN_ON_DANGLING_EDGES=true/false  - Log dangling edges at WARNING
"""

import os
from typing import Dict


def _env_flag(variable: str, default: str = 'true') -> bool:
    return os.getenv(variable, default).lower() == 'true'


# Read once at import; set_flag adjusts them for the running process
FEATURE_FLAGS: Dict[str, bool] = {
    'warn_on_cycles': _env_flag('GRAPH_LAYOUT_WARN_ON_CYCLES'),
    'warn_on_dangling_edges': _env_flag('GRAPH_LAYOUT_WARN_ON_DANGLING_EDGES'),
}


def _check_flag(flag: str) -> None:
    if flag not in FEATURE_FLAGS:
        raise KeyError(
            f"Unknown feature flag: '{flag}'. "
            f"Available flags: {', '.join(FEATURE_FLAGS)}"
        )


def is_enabled(flag: str) -> bool:
    """
    Whether diagnostics guarded by ``flag`` go out at WARNING.

    Raises:
        KeyError: If flag name is not recognized
    """
    _check_flag(flag)
    return FEATURE_FLAGS[flag]


def get_all_flags() -> Dict[str, bool]:
    """Snapshot of every switch; changing it leaves the live flags alone."""
    return dict(FEATURE_FLAGS)


def set_flag(flag: str, enabled: bool) -> None:
    """Override one switch for the rest of the process."""
    _check_flag(flag)
    FEATURE_FLAGS[flag] = enabled
