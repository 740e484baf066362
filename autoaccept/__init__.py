"""
Lolytics Auto Accept - Controller Module
Client-side orchestration for the auto-accept engine:
- Command bridge and event subscriber (engine boundary)
- Connection / monitoring lifecycle and manual accept
- Bounded activity log
- Champion select pick/ban configuration editor

The engine itself (League Client protocol, ready-check and champ select
polling) lives outside this package and is reached only through a transport.
"""

from autoaccept.activity_log import (
    ActivityLog,
    LogEntry,
    Severity,
    MAX_ENTRIES,
)

from autoaccept.bridge import (
    Command,
    CommandBridge,
    CommandError,
)

from autoaccept.busy_guard import BusyGuard

from autoaccept.config_editor import (
    ChampSelectConfigEditor,
    PriorityList,
)

from autoaccept.config_schema import (
    ChampSelectConfig,
    ConfigValidationError,
    ControllerSettings,
    load_settings,
    save_settings,
)

from autoaccept.connection import ConnectionController

from autoaccept.controller import AutomationController

from autoaccept.events import (
    Channel,
    EventSubscriber,
    Subscription,
)

from autoaccept.logging_config import setup_logging

from autoaccept.manual_accept import ManualAccept

from autoaccept.monitoring import MonitoringController

from autoaccept.notifier import NotificationManager

from autoaccept.state_manager import (
    ConnectionState,
    MonitoringState,
    StateManager,
)

__all__ = [
    # Activity log
    'ActivityLog',
    'LogEntry',
    'Severity',
    'MAX_ENTRIES',

    # Engine boundary
    'Command',
    'CommandBridge',
    'CommandError',
    'Channel',
    'EventSubscriber',
    'Subscription',

    # Controllers
    'AutomationController',
    'BusyGuard',
    'ConnectionController',
    'MonitoringController',
    'ManualAccept',
    'ChampSelectConfigEditor',
    'PriorityList',

    # Config
    'ChampSelectConfig',
    'ConfigValidationError',
    'ControllerSettings',
    'load_settings',
    'save_settings',

    # State
    'ConnectionState',
    'MonitoringState',
    'StateManager',

    # Logging / notifications
    'setup_logging',
    'NotificationManager',
]
