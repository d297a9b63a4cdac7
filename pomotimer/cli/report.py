"""Plain-text rendering of timer state."""

from __future__ import annotations

from ..timer.engine import Phase, TimerSnapshot


def format_time(seconds: int) -> str:
    """``MM:SS``; minutes grow past two digits for long sessions."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


def format_stats(snap: TimerSnapshot) -> str:
    if snap.running:
        status = "paused" if snap.paused else "running"
    else:
        status = "waiting"
    phase = "Break" if snap.phase == Phase.ON_BREAK else "Work"
    rows = [
        ("Current session", f"{snap.session_number} ({phase}, {status})"),
        ("Time remaining", format_time(snap.remaining_seconds)),
        ("Completed cycles", str(snap.current_cycle)),
        ("Work sessions done", str(snap.completed_work_sessions)),
        ("Total work time", f"{snap.total_work_seconds // 60} minutes"),
        ("Total break time", f"{snap.total_break_seconds // 60} minutes"),
    ]
    width = max(len(label) for label, _ in rows) + 1
    lines = ["Session statistics"]
    lines += [f"  {label + ':':<{width}} {value}" for label, value in rows]
    return "\n".join(lines)
