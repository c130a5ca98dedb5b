from datetime import date, timedelta

import main
from models import Task
from utils.date_utils import format_date

TODAY = date.today()


def day(offset: int = 0) -> str:
    return format_date(TODAY + timedelta(days=offset))


def add(client, **fields):
    response = client.post("/api/task", json=fields)
    assert response.status_code == 200, response.text
    return response.json()["id"]


def test_complete_one_off_task_deletes_it(client):
    task_id = add(client, title="test task", date=day())

    response = client.post(f"/api/task/done?id={task_id}")
    assert response.status_code == 200
    assert response.json() == {}

    response = client.get(f"/api/task?id={task_id}")
    assert response.status_code == 404
    assert response.json() == {"error": "task not found"}


def test_complete_recurring_task_moves_date(client):
    task_id = add(client, title="recurring task", date=day(), repeat="d 5")

    response = client.post(f"/api/task/done?id={task_id}")
    assert response.status_code == 200
    assert response.json() == {}

    task = client.get(f"/api/task?id={task_id}").json()
    assert task["date"] == day(5)
    assert task["repeat"] == "d 5"


def test_complete_task_with_unusable_rule(client, db):
    # stored directly: the API would reject this rule
    task = Task(date=day(), title="broken", comment="", repeat="m 31 4,6")
    db.add(task)
    db.commit()

    response = client.post(f"/api/task/done?id={task.id}")
    assert response.status_code == 400
    assert response.json()["error"].startswith("failed to compute the new date")


def test_complete_task_errors(client):
    response = client.post("/api/task/done")
    assert response.status_code == 400
    assert response.json() == {"error": "id mustn't be empty"}

    response = client.post("/api/task/done?id=999")
    assert response.status_code == 404


def test_add_and_get_task(client):
    task_id = add(client, title="Buy milk", comment="2 litres", date=day(3))
    assert task_id.isdigit()

    response = client.get(f"/api/task?id={task_id}")
    assert response.status_code == 200
    assert response.json() == {
        "id": task_id,
        "date": day(3),
        "title": "Buy milk",
        "comment": "2 litres",
        "repeat": "",
    }


def test_add_task_defaults_to_today(client):
    task_id = add(client, title="no date")
    assert client.get(f"/api/task?id={task_id}").json()["date"] == day()


def test_add_task_in_the_past(client):
    one_off = add(client, title="late", date="20000101")
    assert client.get(f"/api/task?id={one_off}").json()["date"] == day()

    repeating = add(client, title="late and repeating", date="20000101", repeat="d 1")
    assert client.get(f"/api/task?id={repeating}").json()["date"] == day(1)


def test_add_task_validation(client):
    response = client.post("/api/task", json={"date": day()})
    assert response.status_code == 400
    assert response.json() == {"error": "title is required"}

    response = client.post("/api/task", json={"title": "x", "date": "2024-01-01"})
    assert response.status_code == 400
    assert response.json() == {"error": "invalid date format"}

    response = client.post("/api/task", json={"title": "x", "date": day(), "repeat": "x 1"})
    assert response.status_code == 400
    assert response.json() == {"error": "unsupported interval format 'x 1'"}

    response = client.post("/api/task", json={"title": "x", "date": day(), "repeat": "d 500"})
    assert response.status_code == 400
    assert "500" in response.json()["error"]


def test_add_task_malformed_json(client):
    response = client.post(
        "/api/task", content="{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["error"].startswith("JSON deserialization failed")


def test_update_task(client):
    task_id = add(client, title="draft", date=day(1))

    response = client.put(
        "/api/task",
        json={"id": task_id, "title": "final", "comment": "done", "date": day(2), "repeat": "y"},
    )
    assert response.status_code == 200
    assert response.json() == {}

    task = client.get(f"/api/task?id={task_id}").json()
    assert task == {"id": task_id, "date": day(2), "title": "final", "comment": "done", "repeat": "y"}


def test_update_task_errors(client):
    response = client.put("/api/task", json={"id": "999", "title": "ghost", "date": day()})
    assert response.status_code == 404

    response = client.put("/api/task", json={"title": "no id", "date": day()})
    assert response.status_code == 400
    assert response.json() == {"error": "id mustn't be empty"}

    response = client.put("/api/task", json={"id": "1", "title": "", "date": day()})
    assert response.status_code == 400


def test_delete_task(client):
    task_id = add(client, title="to delete")

    response = client.delete(f"/api/task?id={task_id}")
    assert response.status_code == 200
    assert response.json() == {}

    response = client.delete(f"/api/task?id={task_id}")
    assert response.status_code == 404


def test_get_task_errors(client):
    assert client.get("/api/task").status_code == 400
    assert client.get("/api/task?id=abc").status_code == 404


def test_list_tasks_ordered_by_date(client):
    add(client, title="third", date=day(30))
    add(client, title="first", date=day(1))
    add(client, title="second", date=day(10))

    response = client.get("/api/tasks")
    assert response.status_code == 200
    titles = [task["title"] for task in response.json()["tasks"]]
    assert titles == ["first", "second", "third"]


def test_list_tasks_empty(client):
    assert client.get("/api/tasks").json() == {"tasks": []}


def test_list_tasks_limit(client, settings):
    settings.TASKS_LIMIT = 2
    for offset in range(4):
        add(client, title=f"task {offset}", date=day(offset))
    assert len(client.get("/api/tasks").json()["tasks"]) == 2


def test_search_tasks(client):
    add(client, title="Buy milk", date=day(1))
    add(client, title="Call mom", comment="about the milk", date=day(2))
    add(client, title="Gym", date=day(3))

    tasks = client.get("/api/tasks?search=milk").json()["tasks"]
    assert [task["title"] for task in tasks] == ["Buy milk", "Call mom"]

    search_date = (TODAY + timedelta(days=3)).strftime("%d.%m.%Y")
    tasks = client.get(f"/api/tasks?search={search_date}").json()["tasks"]
    assert [task["title"] for task in tasks] == ["Gym"]


def test_next_date_endpoint(client):
    response = client.get("/api/nextdate", params={"now": "20240305", "date": "20240301", "repeat": "d 3"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "20240307"

    response = client.get("/api/nextdate", params={"now": "20240304", "date": "20240304", "repeat": "w 1,3"})
    assert response.text == "20240306"


def test_next_date_endpoint_defaults_to_today(client):
    response = client.get("/api/nextdate", params={"date": day(), "repeat": "d 1"})
    assert response.status_code == 200
    assert response.text == day(1)


def test_next_date_endpoint_errors(client):
    response = client.get("/api/nextdate", params={"now": "2024-03-05", "date": "20240301", "repeat": "d 3"})
    assert response.status_code == 400
    assert response.text.startswith("invalid 'now' parameter")

    response = client.get("/api/nextdate", params={"now": "20240305", "date": "20240301", "repeat": ""})
    assert response.status_code == 400
    assert "repeat rule is empty" in response.text

    response = client.get("/api/nextdate", params={"now": "20240101", "date": "20240101", "repeat": "m 31 4,6,9,11"})
    assert response.status_code == 400


def test_request_body_too_large(client, monkeypatch):
    monkeypatch.setattr(main.settings, "MAX_UPLOAD_SIZE", 16)
    response = client.post("/api/task", json={"title": "a rather long title", "date": day()})
    assert response.status_code == 413


def test_health(client):
    assert client.get("/health").json() == {"status": "ok", "service": "go-todo"}


def test_add_task_trims_padded_date(client):
    task_id = add(client, title="padded", date=f" {day(4)} ")
    assert client.get(f"/api/task?id={task_id}").json()["date"] == day(4)


def test_add_task_repeating_past_last_calendar_day(client):
    response = client.post("/api/task", json={"title": "x", "date": "99991231", "repeat": "y"})
    assert response.status_code == 400
    assert "out of range" in response.json()["error"]


def test_complete_task_past_last_calendar_day(client, db):
    task = Task(date="99991231", title="last", comment="", repeat="d 1")
    db.add(task)
    db.commit()

    response = client.post(f"/api/task/done?id={task.id}")
    assert response.status_code == 400
    assert response.json()["error"].startswith("failed to compute the new date")


def test_next_date_endpoint_past_last_calendar_day(client):
    response = client.get("/api/nextdate", params={"now": "99991231", "date": "99991231", "repeat": "y"})
    assert response.status_code == 400
    assert response.text.startswith("failed to compute the new date")


def test_chunked_body_too_large(client, monkeypatch):
    monkeypatch.setattr(main.settings, "MAX_UPLOAD_SIZE", 10)
    chunks = (part for part in [b'{"title": ', b'"a rather long title", ', b'"date": ""}'])
    response = client.post("/api/task", content=chunks, headers={"Content-Type": "application/json"})
    assert response.status_code == 413
    assert response.json() == {"error": "request body too large"}


def test_chunked_body_within_limit(client):
    chunks = (part for part in [b'{"title": ', b'"chunked", ', f'"date": "{day(2)}"}}'.encode()])
    response = client.post("/api/task", content=chunks, headers={"Content-Type": "application/json"})
    assert response.status_code == 200
    task_id = response.json()["id"]
    assert client.get(f"/api/task?id={task_id}").json()["title"] == "chunked"
