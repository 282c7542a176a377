"""Example: drive the service layer directly (no Flask).

Uses the in-memory store so it runs without MySQL.
"""

from datetime import date

from src.shift_tracker.shift_tracker.container import build_container


def main():
    container = build_container(backend="memory", admin_username="admin", admin_password_hash="CHANGE_ME")

    print(container.shift_actions.start_shift("emp1"))
    for _ in range(3):
        print(container.shift_actions.add_click("emp1"))
    print(container.status_panel.get_status("emp1"))

    with container.new_dashboard(day=date.today()) as dashboard:
        first = dashboard.query_view().rows()[0]
        dashboard.toggle(first.shift_id)
        print(dashboard.snapshot())


if __name__ == "__main__":
    main()
