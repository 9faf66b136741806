"""
Data collaborator interfaces.

Persistence lives outside the engine. Callers hand in objects that satisfy
these protocols; the engine only ever performs the id-keyed reads below.
"""
from typing import List, Optional, Protocol

from review_engine.models import (
    EmployeeProfile,
    FeedbackSignal,
    GenerationRecord,
    ObjectiveSignal
)


class EmployeeRepository(Protocol):
    async def find_one(self, employee_id: str, organization_id: str) -> Optional[EmployeeProfile]:
        ...


class ObjectiveRepository(Protocol):
    async def find_by_owner(self, employee_id: str) -> List[ObjectiveSignal]:
        """Objectives owned by the employee, key results included."""
        ...


class FeedbackRepository(Protocol):
    async def find_by_receiver(self, employee_id: str) -> List[FeedbackSignal]:
        """Feedback received by the employee, any order."""
        ...


class GenerationLog(Protocol):
    async def save(self, record: GenerationRecord) -> None:
        ...
