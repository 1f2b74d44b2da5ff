"""Selvit core library: deterministic daily targets and intake logs.

Public API re-exports for convenient imports:
    from selvit import target_for_input, summarize_day, load_inputs, ...
"""

# Models
from selvit.models import (
    BOOLEAN,
    DOSAGE,
    Unit,
    Dosage,
    Input,
    LogEntry,
)

# Core computation
from selvit.bounds import compute_bounds, unit_bounds
from selvit.targets import (
    ConfigurationError,
    derive_seed,
    compute_target,
    target_for_input,
)
from selvit.dayclock import (
    DAY_START,
    logical_day_start,
    logical_day_end,
    logical_day_of,
    day_window,
)
from selvit.logs import logs_for_day, sum_for_day, totals_for_day
from selvit.summary import (
    InputStatus,
    DaySummary,
    order_inputs,
    summarize_day,
    summarize_days,
    report_days,
    render_day,
)

# Workspace & settings
from selvit.workspace import (
    Settings,
    workspace_root,
    load_settings,
    get_user_timezone,
    now_local,
    logical_today,
    config_path,
    inputs_dir,
    log_dir,
)

# Persistence & sync
from selvit.store import (
    StoreError,
    SaveResult,
    load_inputs,
    get_input,
    save_input,
    refresh_inputs,
    set_valid_after,
    find_unit,
    input_for_unit,
    load_logs,
    load_logs_for_day,
    save_log,
    log_quantity,
)
from selvit.sync import SyncError, push_changes
