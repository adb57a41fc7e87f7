"""VisionFlow core library: planner data layer, sync and derived state.

Public API re-exports for convenient imports:
    from visionflow import Planner, MemoryDocumentStore, overload_stats, ...
"""

# Workspace, clocks & calendar
from visionflow.workspace import (
    workspace_root,
    Clock,
    SystemClock,
    FixedClock,
    today_str,
    next_day_str,
    settings_path,
    hooks_config_path,
    documents_root,
)

# Settings
from visionflow.config import Settings, init_settings, load_settings, save_settings

# File I/O
from visionflow.fileio import (
    read_text,
    read_json,
    read_yaml,
    write_json_atomic,
    write_yaml_atomic,
)

# Document store
from visionflow.store import (
    StoreError,
    DocumentRef,
    Snapshot,
    DocumentStore,
    MemoryDocumentStore,
    FileDocumentStore,
    open_store,
)

# Sync bindings
from visionflow.sync import (
    COLLECTION_NAMES,
    SyncBinding,
    Collections,
    default_documents,
)

# Categories
from visionflow.categories import (
    DEFAULT_CATEGORIES,
    add_subcategory,
    display_category,
    tasks_by_category,
)

# Tasks, goals, vision
from visionflow.tasks import (
    validate_task,
    new_id,
    find_task,
    create_task,
    toggle_task_status,
    viewed_tasks,
)
from visionflow.goals import validate_goal, create_goal
from visionflow.vision import update_vision, set_theme, update_weekly_focus

# Reflections & rollover
from visionflow.reflections import (
    validate_reflection,
    build_reflection,
    save_reflection,
    reflection_for_date,
    recent_reflections,
)
from visionflow.rollover import unfinished_tasks, default_selections, rollover_tasks
from visionflow.finalize import close_day

# Derived state
from visionflow.analytics import (
    overload_stats,
    weekly_time_distribution,
    subcategory_allocation,
    mood_trend,
    dashboard_summary,
)
from visionflow.reminders import (
    is_morning_review_time,
    is_evening_reflection_time,
    reminders,
)

# Hooks
from visionflow.hooks import run_hooks, load_hooks_config

# Facade
from visionflow.planner import Planner

# Models
from visionflow.models import (
    STATUS_DONE,
    STATUS_NOT_STARTED,
    PRIORITIES,
    Vision,
    Goal,
    WeeklyFocus,
    Task,
    Reflection,
    OverloadStats,
    CategoryShare,
    DashboardSummary,
)
