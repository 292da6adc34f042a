import os
from datetime import datetime, timezone
from flask import current_app, has_app_context

DEFAULT_AUDIT_LOG_FILE = os.path.join("logs", "audit.log")


def _audit_log_file():
    if has_app_context():
        return current_app.config.get("AUDIT_LOG_FILE") or DEFAULT_AUDIT_LOG_FILE
    return DEFAULT_AUDIT_LOG_FILE


def log_event(event_type, user_id=None, ip=None, description=None, level="INFO", print_to_console=False):
    """
    Logs a security or audit-related event to a file.

    Parameters:
        event_type (str): The type of the event (e.g., LOGIN_SUCCESS, CLOCK_IN).
        user_id (int|None): The acting user ID, if available.
        ip (str|None): IP address, if available.
        description (str|None): Additional context.
        level (str): Log level (e.g., INFO, WARNING, ERROR).
        print_to_console (bool): Also send the entry to the app logger (for debugging/dev).
    """
    audit_log_file = _audit_log_file()
    log_dir = os.path.dirname(audit_log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    timestamp = datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')
    log_entry = (
        f"[{timestamp}] [{level.upper()}] EVENT: {event_type} | "
        f"USER: {user_id or 'N/A'} | IP: {ip or 'N/A'} | DESC: {description or 'N/A'}\n"
    )

    with open(audit_log_file, "a", encoding="utf-8") as log_file:
        log_file.write(log_entry)

    if print_to_console and has_app_context():
        current_app.logger.info(log_entry.strip())
