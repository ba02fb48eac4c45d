from datetime import datetime, timedelta

from conftest import create_plan

from career_transition.services.progress import get_progress_stats


def test_progress_requires_a_plan(client, auth):
    for path in ("/api/progress", "/api/progress/detailed"):
        response = client.get(path, headers=auth["headers"])
        assert response.status_code == 404

    response = client.put(
        "/api/progress/task",
        json={"taskId": "t1", "completed": True},
        headers=auth["headers"],
    )
    assert response.status_code == 404


def test_task_completion_updates_stats(client, auth, db):
    create_plan(db, auth["user_id"])

    response = client.put(
        "/api/progress/task",
        json={"taskId": "t1", "completed": True},
        headers=auth["headers"],
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Task marked as complete!"
    assert body["completedTasks"] == 1
    assert body["totalTasks"] == 3
    assert body["currentPhase"] == 0


def test_toggle_task_restores_state(client, auth, db):
    _, progress = create_plan(db, auth["user_id"], completed=["t3"], streak=2)

    client.put("/api/progress/task", json={"taskId": "t1", "completed": True}, headers=auth["headers"])
    response = client.put(
        "/api/progress/task",
        json={"taskId": "t1", "completed": False},
        headers=auth["headers"],
    )

    assert response.json()["message"] == "Task unmarked"
    db.refresh(progress)
    assert progress.completed_tasks == ["t3"]
    assert progress.streak_days == 2


def test_completed_must_be_boolean(client, auth, db):
    create_plan(db, auth["user_id"])

    response = client.put(
        "/api/progress/task",
        json={"taskId": "t1", "completed": "yes"},
        headers=auth["headers"],
    )

    assert response.status_code == 400


def test_streak_grows_on_consecutive_days_and_resets_after_gap(client, auth, db):
    _, progress = create_plan(
        db,
        auth["user_id"],
        streak=3,
        last_activity=datetime.utcnow() - timedelta(days=1, hours=1),
    )
    response = client.put(
        "/api/progress/task",
        json={"taskId": "t1", "completed": True},
        headers=auth["headers"],
    )
    assert response.json()["streakDays"] == 4

    progress.last_activity = datetime.utcnow() - timedelta(days=4)
    db.commit()
    response = client.put(
        "/api/progress/task",
        json={"taskId": "t2", "completed": True},
        headers=auth["headers"],
    )
    assert response.json()["streakDays"] == 1


def test_milestone_completion_is_one_update(client, auth, db):
    _, progress = create_plan(
        db,
        auth["user_id"],
        streak=2,
        last_activity=datetime.utcnow() - timedelta(days=1, hours=1),
    )

    response = client.post("/api/progress/milestone/m1/complete", headers=auth["headers"])

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Milestone completed! Great job!"
    assert body["completedTasks"] == 2
    assert body["streakDays"] == 3
    assert body["currentPhase"] == 1
    db.refresh(progress)
    assert sorted(progress.completed_tasks) == ["t1", "t2"]
    assert sum(progress.activity_log.values()) == 2


def test_milestone_with_nothing_pending_changes_nothing(client, auth, db):
    last_activity = datetime.utcnow() - timedelta(days=3)
    _, progress = create_plan(
        db,
        auth["user_id"],
        completed=["t1", "t2"],
        streak=5,
        last_activity=last_activity,
    )

    response = client.post("/api/progress/milestone/m1/complete", headers=auth["headers"])
    assert response.status_code == 200
    assert response.json()["streakDays"] == 5

    response = client.post("/api/progress/milestone/unknown/complete", headers=auth["headers"])
    assert response.status_code == 200

    db.refresh(progress)
    assert progress.streak_days == 5
    assert progress.last_activity == last_activity


def test_dashboard_shape(client, auth, db):
    create_plan(db, auth["user_id"], completed=["t1"], streak=1)

    response = client.get("/api/progress", headers=auth["headers"])

    assert response.status_code == 200
    body = response.json()
    assert body["userId"] == auth["user_id"]
    assert body["completedTasks"] == 1
    assert body["currentStreak"] == 1
    assert len(body["activityData"]) == 7
    assert [badge["id"] for badge in body["achievements"]] == ["first-task"]
    assert [task["id"] for task in body["upcomingDeadlines"]] == ["t2", "t3"]
    assert body["recentMilestones"] == []


def test_detailed_progress_marks_tasks(client, auth, db):
    create_plan(db, auth["user_id"], completed=["t3"])

    body = client.get("/api/progress/detailed", headers=auth["headers"]).json()

    assert body["currentPhase"] == 0
    first, second = body["phases"]
    assert first["tasksCompleted"] == 0
    assert first["tasksTotal"] == 2
    assert second["milestones"][0]["tasks"][0] == {"id": "t3", "title": "Build project", "completed": True}


def test_stats_derive_phase_instead_of_trusting_snapshot(auth, db):
    _, progress = create_plan(db, auth["user_id"], completed=["t1", "t2"])
    progress.current_phase = 0
    db.commit()

    stats = get_progress_stats(db, auth["user_id"])

    assert stats["currentPhase"] == 1
    assert stats["completedTasks"] == 2
    assert stats["totalTasks"] == 3
