"""
Builders for sample signals and model output, plus in-memory data
collaborators, shared across the test suite.
"""
import json
from datetime import timedelta
from typing import Dict, List, Optional

from review_engine.models import (
    EmployeeProfile,
    FeedbackSignal,
    GenerationRecord,
    KeyResultSignal,
    ObjectiveSignal
)
from review_engine.utils.helpers import utc_now


def make_objective(index: int, progress: float = 50, description: Optional[str] = "Ship it",
                   level: str = "individual", **kwargs) -> ObjectiveSignal:
    return ObjectiveSignal(
        id=f"okr-{index}",
        title=f"Objective {index}",
        description=description,
        level=level,
        progress=progress,
        status="active",
        created_at=utc_now() - timedelta(days=60),
        key_results=[
            KeyResultSignal(id=f"kr-{index}-1", title=f"Key result {index}", progress=progress)
        ],
        **kwargs
    )


def make_feedback(index: int, length: int = 150, tags: Optional[List[str]] = None,
                  days_ago: int = 10) -> FeedbackSignal:
    return FeedbackSignal(
        id=f"fb-{index}",
        content=("x" * length),
        tags=["collaboration"] if tags is None else tags,
        visibility="public",
        given_by_name="Grace Hopper",
        given_by_id="emp-2",
        created_at=utc_now() - timedelta(days=days_ago + index)
    )


def review_json(**overrides) -> str:
    review = {
        "strengths": "Clear communicator",
        "areasForImprovement": "Delegation",
        "achievements": "Shipped the billing service",
        "goalsForNextPeriod": "Lead the migration",
        "developmentPlan": "Mentoring program",
        "managerComments": "Strong year",
    }
    review.update(overrides)
    return json.dumps(review)


class InMemoryEmployees:
    def __init__(self, employees: List[EmployeeProfile]):
        self.employees = {employee.id: employee for employee in employees}

    async def find_one(self, employee_id: str, organization_id: str) -> Optional[EmployeeProfile]:
        employee = self.employees.get(employee_id)
        if employee and employee.organization_id == organization_id:
            return employee
        return None


class InMemoryObjectives:
    def __init__(self, by_owner: Dict[str, List[ObjectiveSignal]]):
        self.by_owner = by_owner

    async def find_by_owner(self, employee_id: str) -> List[ObjectiveSignal]:
        return list(self.by_owner.get(employee_id, []))


class InMemoryFeedback:
    def __init__(self, received: Dict[str, List[FeedbackSignal]]):
        self.received = received

    async def find_by_receiver(self, employee_id: str) -> List[FeedbackSignal]:
        return list(self.received.get(employee_id, []))


class InMemoryGenerationLog:
    def __init__(self):
        self.records: List[GenerationRecord] = []

    async def save(self, record: GenerationRecord) -> None:
        self.records.append(record)
