"""Ad-hoc database migrations for HabitStreaks."""

from __future__ import annotations

from sqlalchemy import text


def ensure_schedule_indexes(conn) -> None:
    conn.execute(
        text(
            """
            CREATE INDEX IF NOT EXISTS idx_schedule_task_effective
            ON task_schedule (task_id, effective_from, effective_to)
            """
        )
    )
    # At most one open-ended rule per task.
    conn.execute(
        text(
            """
            CREATE UNIQUE INDEX IF NOT EXISTS ux_task_schedule_active
            ON task_schedule (task_id)
            WHERE effective_to IS NULL
            """
        )
    )


def ensure_stats_rows(conn) -> None:
    conn.execute(
        text(
            """
            INSERT INTO task_stats (task_id, current_streak, best_streak, updated_at)
            SELECT t.id, 0, 0, CAST(strftime('%s', 'now') AS INTEGER)
            FROM task t
            WHERE NOT EXISTS (SELECT 1 FROM task_stats s WHERE s.task_id = t.id)
            """
        )
    )


def run_all(engine) -> None:
    with engine.begin() as conn:
        ensure_schedule_indexes(conn)
        ensure_stats_rows(conn)


__all__ = ["run_all"]
