from __future__ import annotations

import streamlit as st

from ecolife_coach.charts import build_daily_log_figure, build_points_history_figure
from ecolife_coach.engine import TaskEngine
from ecolife_coach.models import Section, ViewMode
from ecolife_coach.notifications import NotificationCenter
from ecolife_coach.state import get_engine, get_notification_center

SECTION_ICONS = {Section.HEALTH: "❤️", Section.ECO: "🌿"}


def _mode_key(section: Section) -> str:
    return f"mode_{section.value}"


def render_metrics(engine: TaskEngine) -> None:
    points_col, streak_col, done_col = st.columns(3)
    points_col.metric("Today's Points", engine.total_points)
    streak_col.metric("Current Streak", f"{engine.streak} days")
    done_total = sum(engine.completed_count(section) for section in Section)
    task_total = sum(len(engine.tasks(section)) for section in Section)
    done_col.metric("Tasks done", f"{done_total}/{task_total}")


def sync_mode_widget(engine: TaskEngine, section: Section) -> None:
    """Point the mode radio at the engine's mode, which another tab may have changed."""

    st.session_state[_mode_key(section)] = engine.cursor(section).mode.value


def _on_mode_change(engine: TaskEngine, section: Section) -> None:
    engine.set_mode(section, st.session_state[_mode_key(section)])


def render_section(engine: TaskEngine, section: Section) -> None:
    tasks = engine.tasks(section)
    cursor = engine.cursor(section)

    with st.container(border=True):
        st.subheader(f"{SECTION_ICONS[section]} {section.label} Tasks")
        st.caption(f"{engine.completed_count(section)} of {len(tasks)} completed")

        sync_mode_widget(engine, section)
        st.radio(
            "View",
            options=[mode.value for mode in ViewMode],
            format_func=lambda value: ViewMode(value).label,
            key=_mode_key(section),
            horizontal=True,
            on_change=_on_mode_change,
            args=(engine, section),
        )

        if not tasks:
            st.info("No tasks in this section.")
            return

        if cursor.mode is ViewMode.FOCUS:
            current = engine.current_task(section)
            if current is not None:
                st.markdown(f"**{current.label}** · {current.points} pts")
                if current.details is not None and current.details.summary:
                    st.caption(current.details.summary)
                label = "Undo" if current.completed else "Complete"
                if st.button(label, key=f"focus_toggle_{section.value}", type="primary"):
                    engine.toggle(section, cursor.index)
                    st.rerun()
            if engine.all_done(section):
                st.success("All done for today!")
        else:
            for index, task in enumerate(tasks):
                marker = "▶ " if index == cursor.index else ""
                checked = st.checkbox(
                    f"{marker}{task.label} ({task.points} pts)",
                    value=task.completed,
                    key=f"task_{section.value}_{task.id}_{task.completed}",
                )
                if checked != task.completed:
                    engine.toggle(section, index)
                    st.rerun()

        prev_col, next_col, reset_col = st.columns(3)
        if prev_col.button("◀ Prev", key=f"prev_{section.value}"):
            engine.prev(section)
            st.rerun()
        if next_col.button("Next ▶", key=f"next_{section.value}"):
            engine.next(section)
            st.rerun()
        if reset_col.button("Reset", key=f"reset_{section.value}"):
            engine.reset_all(section)
            st.rerun()

        recent = engine.recent_tasks(section)
        if recent:
            st.caption("Recently completed: " + ", ".join(task.label for task in recent))


def render_notifications(center: NotificationCenter) -> None:
    with st.sidebar:
        st.header(f"🔔 Notifications ({center.unread_count} unread)")
        if st.button("Mark all as read", disabled=center.unread_count == 0):
            center.mark_all_read()
            st.rerun()
        if not center.items:
            st.caption("You're all caught up. 🎉")
        for item in center.items[:10]:
            prefix = "● " if item.unread else ""
            with st.expander(f"{prefix}{item.title}"):
                if item.description:
                    st.write(item.description)
                st.caption(item.timestamp.strftime("%Y-%m-%d %H:%M"))
                if item.unread and st.button("Mark as read", key=f"read_{item.id}"):
                    center.mark_read(item.id)
                    st.rerun()


def render_history(engine: TaskEngine) -> None:
    with st.expander("History"):
        st.plotly_chart(build_daily_log_figure(engine.daily_log, engine.clock()), use_container_width=True)
        if engine.history:
            st.plotly_chart(build_points_history_figure(engine.history), use_container_width=True)
        else:
            st.caption("No snapshots yet. Complete a task to start your history.")


def main() -> None:
    st.set_page_config(
        page_title="EcoLife Coach",
        page_icon="🌱",
        layout="wide",
        initial_sidebar_state="expanded",
    )
    engine = get_engine()
    center = get_notification_center()

    st.title("Dashboard")
    st.caption("Track your progress and stay motivated")
    render_notifications(center)
    render_metrics(engine)

    health_col, eco_col = st.columns(2)
    with health_col:
        render_section(engine, Section.HEALTH)
    with eco_col:
        render_section(engine, Section.ECO)

    render_history(engine)


if __name__ == "__main__":
    main()
