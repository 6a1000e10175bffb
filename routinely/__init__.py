"""Routinely core library: data model, analytics engine and local store.

Public API re-exports for convenient imports:
    from routinely import RoutineStore, generate_insights, calculate_current_streak, ...
"""

# Workspace & paths
from routinely.workspace import (
    workspace_root,
    load_settings,
    get_user_timezone,
    today_str,
    today_local,
    now_local,
    configure_logging,
    settings_path,
    routines_path,
    completions_path,
    analytics_path,
    hooks_config_path,
)

# Errors
from routinely.errors import (
    RoutinelyError,
    ValidationError,
    RoutineNotFoundError,
    StorageError,
)

# Models
from routinely.models import (
    ALL_DAY,
    Settings,
    RoutineItem,
    CompletionRecord,
    Insight,
    StreakData,
    DayStats,
    TodaySummary,
    AnalyticsSnapshot,
)

# Analytics engine
from routinely.streaks import (
    SUCCESS_THRESHOLD,
    day_completion_rate,
    calculate_current_streak,
    calculate_best_streak,
    calculate_streaks,
)
from routinely.insights import generate_insights
from routinely.analytics import (
    today_summary,
    weekly_stats,
    heatmap,
    build_snapshot,
    refresh_analytics,
    load_analytics,
)

# Routines & store
from routinely.routines import VALID_CATEGORIES, validate_routine
from routinely.seed import DEFAULT_ROUTINES, generate_demo_completions
from routinely.store import RoutineStore
