from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from ledger_metrics.crud import crud_goal
from ledger_metrics.db.core import GoalDB, GoalStatus, NotFoundError
from ledger_metrics.metrics.goals import COMMON_GOALS, recommend_goals
from ledger_metrics.models.goal import GoalCreate, GoalUpdate


def _goal(category, status="active"):
    return SimpleNamespace(category=category, status=status)


def test_recommendations_skip_categories_of_active_goals():
    suggestions = recommend_goals([_goal("emergency_fund"), _goal("vacation")])
    categories = [suggestion["category"] for suggestion in suggestions]

    assert "emergency_fund" not in categories
    assert "vacation" not in categories
    assert len(suggestions) == len(COMMON_GOALS) - 2


def test_recommendations_ignore_goals_that_are_not_active():
    suggestions = recommend_goals([
        _goal("emergency_fund", GoalStatus.PAUSED),
        _goal("retirement", "completed"),
    ])
    categories = [suggestion["category"] for suggestion in suggestions]

    assert "emergency_fund" in categories
    assert "retirement" in categories


def test_recommendations_are_ordered_by_priority():
    priorities = [suggestion["priority"] for suggestion in recommend_goals([])]

    assert priorities == sorted(priorities)
    assert recommend_goals([])[0]["name"] == "Emergency Fund"


def test_goal_defaults_and_fields(db):
    goal = crud_goal.create_db_goal(db, 1, GoalCreate(
        name="House deposit",
        target_amount=Decimal("60000"),
        currency="eur",
        deadline=date(2027, 6, 30),
        category="home_purchase",
        priority=2,
    ))

    assert goal.status == GoalStatus.ACTIVE
    assert goal.currency == "EUR"
    assert goal.deadline == date(2027, 6, 30)
    assert goal.category == "home_purchase"
    assert goal.priority == 2


def test_goal_created_at_target_is_completed(db):
    goal = crud_goal.create_db_goal(db, 1, GoalCreate(
        name="Bike", target_amount=Decimal("800"), current_amount=Decimal("800")
    ))
    assert goal.status == GoalStatus.COMPLETED


def test_update_goal_fields_and_status(db):
    goal = crud_goal.create_db_goal(db, 1, GoalCreate(name="Trip", target_amount=Decimal("3000")))

    goal = crud_goal.update_db_goal(db, goal.id, 1, GoalUpdate(
        name="Japan trip", priority=3, status="PAUSED", deadline=date(2026, 4, 1)
    ))

    assert goal.name == "Japan trip"
    assert goal.priority == 3
    assert goal.status == GoalStatus.PAUSED
    assert goal.deadline == date(2026, 4, 1)


def test_update_goal_reaching_target_completes_it(db):
    goal = crud_goal.create_db_goal(db, 1, GoalCreate(name="Laptop", target_amount=Decimal("1500")))

    goal = crud_goal.update_db_goal(db, goal.id, 1, GoalUpdate(current_amount=Decimal("1600")))

    assert goal.status == GoalStatus.COMPLETED


def test_update_missing_goal_raises(db):
    with pytest.raises(NotFoundError):
        crud_goal.update_db_goal(db, 999, 1, GoalUpdate(name="Nothing"))


def test_goal_recommendations_use_active_goals_only(db):
    crud_goal.create_db_goal(db, 1, GoalCreate(
        name="Rainy day", target_amount=Decimal("10000"), category="emergency_fund"
    ))
    crud_goal.create_db_goal(db, 1, GoalCreate(
        name="Pension top-up", target_amount=Decimal("50000"), category="retirement", status="PAUSED"
    ))

    result = crud_goal.get_goal_recommendations(db, 1)

    assert [goal.name for goal in result["current_goals"]] == ["Rainy day"]
    categories = [suggestion["category"] for suggestion in result["recommendations"]]
    assert "emergency_fund" not in categories
    assert "retirement" in categories


def test_goal_status_and_priority_columns():
    assert {status.value for status in GoalStatus} == {"ACTIVE", "COMPLETED", "CANCELLED", "PAUSED"}
    assert "priority" in GoalDB.__table__.columns
    assert "deadline" in GoalDB.__table__.columns
    assert "target_date" not in GoalDB.__table__.columns


def test_goal_recommendations_endpoint(client):
    client.post("/goals/", json={"name": "Rainy day", "target_amount": "5000", "category": "emergency_fund"})

    response = client.get("/goals/recommendations")
    assert response.status_code == 200
    body = response.json()
    assert [goal["name"] for goal in body["current_goals"]] == ["Rainy day"]
    assert body["recommendations"][0]["category"] == "debt_payoff"


def test_update_goal_endpoint(client):
    goal = client.post("/goals/", json={"name": "Car", "target_amount": "12000"}).json()

    response = client.put(f"/goals/{goal['id']}", json={"status": "CANCELLED", "priority": 4})
    assert response.status_code == 200
    assert response.json()["status"] == "CANCELLED"
    assert response.json()["priority"] == 4

    assert client.put("/goals/999", json={"name": "Ghost"}).status_code == 404
