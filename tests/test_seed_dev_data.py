import sqlite3

from tasktracker.scripts.seed_dev_data import DEMO_TASKS, seed_dev_data


def test_seed_dev_data_is_idempotent_and_creates_defaults(tmp_path):
    db_path = tmp_path / "seed.db"
    database_url = f"sqlite+aiosqlite:///{db_path}"

    # Run twice to assert idempotency.
    r1 = seed_dev_data(database_url)
    r2 = seed_dev_data(database_url)

    assert r1.default_user_id == r2.default_user_id
    assert len(r1.created_task_ids) == len(DEMO_TASKS)
    assert r2.created_task_ids == ()

    with sqlite3.connect(db_path) as conn:
        assert conn.execute("SELECT name FROM users WHERE id = ?", (r1.default_user_id,)).fetchone() == ("Unknown",)
        assert conn.execute("SELECT name FROM categories WHERE id = ?", (r1.default_category_id,)).fetchone() == (
            "Default",
        )
        assert conn.execute("SELECT COUNT(*) FROM statuses WHERE name = ?", ("Pending",)).fetchone() == (1,)
        assert conn.execute("SELECT COUNT(*) FROM tasks").fetchone() == (len(DEMO_TASKS),)
