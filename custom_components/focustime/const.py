# File: const.py
"""Constants for the FocusTime integration.

This file centralizes configuration keys, defaults, storage field names,
service names and signal suffixes for consistency across the integration.
Storage field names keep the legacy camelCase document shape so that stored
documents written by earlier versions load without a rewrite.
"""

import logging
from typing import Final

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
FOCUSTIME_TITLE = "FocusTime"

# Integration Domain
DOMAIN = "focustime"

# Logger
LOGGER = logging.getLogger(__package__)

# hass.data keys
STATISTICS_MANAGER = "statistics_manager"
STORE = "store"

# Storage and Versioning
STORAGE_KEY = "focustime_data"
STORAGE_VERSION = 1

# ------------------------------------------------------------------------------------------------
# Period Types
# ------------------------------------------------------------------------------------------------
PERIOD_DAILY = "daily"
PERIOD_WEEKLY = "weekly"
PERIOD_MONTHLY = "monthly"
PERIOD_LIFETIME = "lifetime"

PERIOD_FORMAT_DAILY = "%Y-%m-%d"
PERIOD_FORMAT_MONTHLY = "%Y-%m"

# Weeks start on Saturday (Python weekday(): Monday=0 ... Saturday=5)
WEEK_START_WEEKDAY = 5

# ------------------------------------------------------------------------------------------------
# Stored Document Fields
# ------------------------------------------------------------------------------------------------
DATA_DAILY = "daily"
DATA_WEEKLY = "weekly"
DATA_MONTHLY = "monthly"
DATA_LIFETIME = "lifetime"
DATA_GOALS = "goals"
DATA_LABELS = "labels"
DATA_PREVIOUS_PERIODS = "previousPeriods"
DATA_BEST_RECORDS = "bestRecords"
DATA_EVENTS = "timestampedSessions"

# Bucket fields
DATA_BUCKET_MINUTES = "minutes"
DATA_BUCKET_SESSIONS = "sessions"
DATA_BUCKET_LABELS = "labels"

# Lifetime fields
DATA_LIFETIME_TOTAL_MINUTES = "totalMinutes"
DATA_LIFETIME_TOTAL_SESSIONS = "totalSessions"
DATA_LIFETIME_START_DATE = "startDate"
DATA_LIFETIME_LABELS = "labels"

# Goal fields
DATA_GOALS_DAILY = "dailyMinutes"
DATA_GOALS_WEEKLY = "weeklyMinutes"
DATA_GOALS_MONTHLY = "monthlyMinutes"

# Previous period snapshot fields
DATA_PREVIOUS_DAY = "previousDay"
DATA_PREVIOUS_WEEK = "previousWeek"
DATA_PREVIOUS_MONTH = "previousMonth"
DATA_PREVIOUS_PERIOD_KEY = "periodKey"

# Best record fields
DATA_BEST_DAY = "bestDay"
DATA_BEST_WEEK = "bestWeek"
DATA_BEST_MONTH = "bestMonth"
DATA_BEST_MINUTES = "minutes"
DATA_BEST_PERIOD_KEY = "periodKey"
DATA_BEST_SESSIONS = "sessions"

# Raw event fields
DATA_EVENT_TIMESTAMP = "timestamp"
DATA_EVENT_MINUTES = "minutes"
DATA_EVENT_LABEL = "label"
DATA_EVENT_SESSIONS = "sessions"

# Float precision for minute rounding
DATA_FLOAT_PRECISION = 2

# ------------------------------------------------------------------------------------------------
# Defaults
# ------------------------------------------------------------------------------------------------
DEFAULT_ZERO = 0
DEFAULT_LABELS: Final[tuple[str, ...]] = ("study", "programming", "other")
DEFAULT_CATEGORY = "study"
FALLBACK_CATEGORY = "other"

DEFAULT_GOAL_DAILY_MINUTES = 120
DEFAULT_GOAL_WEEKLY_MINUTES = 600
DEFAULT_GOAL_MONTHLY_MINUTES = 2400

MIN_GOAL_DAILY_MINUTES = 30
MIN_GOAL_WEEKLY_MINUTES = 180
MIN_GOAL_MONTHLY_MINUTES = 720

DEFAULT_RECENT_WINDOW_MINUTES = 360

# Service input bounds
MAX_RECORD_MINUTES = 1440
MAX_MANUAL_HOURS = 24
MAX_WINDOW_MINUTES = 10080

# Raw events are capped so the document stays bounded
DEFAULT_MAX_EVENTS = 5000

# ------------------------------------------------------------------------------------------------
# Retention
# ------------------------------------------------------------------------------------------------
DEFAULT_RETENTION_DAILY = 30  # days
DEFAULT_RETENTION_WEEKLY = 12  # weeks
DEFAULT_RETENTION_MONTHLY = 12  # months
DEFAULT_RETENTION_EVENTS = 7  # days

# Smallest horizons that still keep the previous period reachable
MIN_RETENTION_DAILY = 1
MIN_RETENTION_WEEKLY = 1
MIN_RETENTION_MONTHLY = 1
MIN_RETENTION_EVENTS = 1

RETENTION_EVENTS = "events"

# ------------------------------------------------------------------------------------------------
# Configuration Keys (options flow)
# ------------------------------------------------------------------------------------------------
CONF_RETENTION_DAILY = "retention_daily"
CONF_RETENTION_WEEKLY = "retention_weekly"
CONF_RETENTION_MONTHLY = "retention_monthly"
CONF_RETENTION_EVENTS = "retention_events"
CONF_RECENT_WINDOW_MINUTES = "recent_window_minutes"

# ------------------------------------------------------------------------------------------------
# Presentation Keys (snapshot / service responses)
# ------------------------------------------------------------------------------------------------
PRES_TODAY = "today"
PRES_THIS_WEEK = "this_week"
PRES_THIS_MONTH = "this_month"
PRES_LIFETIME = "lifetime"
PRES_PREVIOUS_DAY = "previous_day"
PRES_PREVIOUS_WEEK = "previous_week"
PRES_PREVIOUS_MONTH = "previous_month"
PRES_RECENT = "recent"
PRES_BEST_RECORDS = "best_records"
PRES_GOALS = "goals"
PRES_GOAL_PROGRESS = "goal_progress"
PRES_LABELS = "labels"
PRES_PERIOD_KEY = "period_key"
PRES_START_DATE = "start_date"
PRES_TOTAL_MINUTES = "total_minutes"
PRES_SESSION_COUNT = "session_count"
PRES_CATEGORY_BREAKDOWN = "category_breakdown"
PRES_FORMATTED = "formatted"
PRES_WINDOW_MINUTES = "window_minutes"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_RECORD_TIME = "record_time"
SERVICE_ADD_MANUAL_TIME = "add_manual_time"
SERVICE_SET_GOALS = "set_goals"
SERVICE_ADD_LABEL = "add_label"
SERVICE_REMOVE_LABEL = "remove_label"
SERVICE_CLEANUP = "cleanup"
SERVICE_GET_STATS = "get_stats"
SERVICE_RESET_STATS = "reset_stats"

FIELD_MINUTES = "minutes"
FIELD_HOURS = "hours"
FIELD_CATEGORY = "category"
FIELD_SESSIONS = "sessions"
FIELD_DAILY_MINUTES = "daily_minutes"
FIELD_WEEKLY_MINUTES = "weekly_minutes"
FIELD_MONTHLY_MINUTES = "monthly_minutes"
FIELD_LABEL = "label"
FIELD_WINDOW_MINUTES = "window_minutes"

# ------------------------------------------------------------------------------------------------
# Signals
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_STATS_UPDATED = "stats_updated"

# ------------------------------------------------------------------------------------------------
# Translation Keys / Messages
# ------------------------------------------------------------------------------------------------
TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"
TRANS_KEY_ERROR_NO_ENTRY = "no_entry_loaded"
TRANS_KEY_ERROR_STORAGE = "storage_error"
MSG_NO_ENTRY_FOUND = "No FocusTime entry found"
