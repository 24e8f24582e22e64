from datetime import datetime, timezone


def format_log_line(message, level="INFO"):
    """Log file entry: "[2025-12-05 20:00:00] [INFO] message" (UTC)."""
    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
    return f"[{timestamp}] [{level}] {message}"


def console_log(message, level="INFO"):
    """Default log_func for library code: print, flagging anything above INFO."""
    if level == "INFO":
        print(message)
    else:
        print(f"{level}: {message}")
