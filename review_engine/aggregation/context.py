"""
Context aggregation for review generation.

Collects an employee's objectives, key results and received feedback for a
time window. Read-only: nothing here writes to the data collaborators.
"""
import asyncio
import logging
from typing import List, Optional, Tuple

from config.settings import Settings as settings
from review_engine.exceptions import NotFoundError
from review_engine.models import (
    EmployeeContext,
    EmployeeProfile,
    FeedbackSignal,
    ObjectiveSignal,
    Timeframe
)
from review_engine.storage.repositories import (
    EmployeeRepository,
    FeedbackRepository,
    ObjectiveRepository
)
from review_engine.utils.helpers import ensure_utc

logger = logging.getLogger(__name__)


def filter_objectives(objectives: List[ObjectiveSignal], timeframe: Timeframe) -> List[ObjectiveSignal]:
    """Keep objectives that were still open at the start of the window."""
    start = ensure_utc(timeframe.start_date)
    return [
        objective for objective in objectives
        if objective.due_date is None or ensure_utc(objective.due_date) >= start
    ]


def filter_feedback(feedback: List[FeedbackSignal], timeframe: Timeframe) -> List[FeedbackSignal]:
    """Feedback created inside the window, newest first."""
    in_window = [item for item in feedback if timeframe.contains(item.created_at)]
    return sorted(in_window, key=lambda item: ensure_utc(item.created_at), reverse=True)


class ContextAggregator:
    """
    Builds EmployeeContext records from the data collaborators.

    Holds no per-request state, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        objectives: ObjectiveRepository,
        feedback: FeedbackRepository
    ):
        self.employees = employees
        self.objectives = objectives
        self.feedback = feedback

    async def resolve_employee(self, employee_id: str, organization_id: str) -> EmployeeProfile:
        """
        Look up an employee inside an organization.

        Raises:
            NotFoundError: If the employee does not exist in the organization
        """
        employee = await self.employees.find_one(employee_id, organization_id)
        if employee is None:
            raise NotFoundError(
                "Employee not found",
                details={"employee_id": employee_id, "organization_id": organization_id}
            )
        return employee

    async def collect_signals(
        self,
        employee_id: str,
        timeframe: Timeframe
    ) -> Tuple[List[ObjectiveSignal], List[FeedbackSignal]]:
        """Fetch objectives and received feedback concurrently, then window them."""
        objectives, feedback = await asyncio.gather(
            self.objectives.find_by_owner(employee_id),
            self.feedback.find_by_receiver(employee_id)
        )
        return filter_objectives(objectives, timeframe), filter_feedback(feedback, timeframe)

    async def gather_context(
        self,
        employee_id: str,
        organization_id: str,
        timeframe: Optional[Timeframe] = None
    ) -> EmployeeContext:
        """
        Collect everything known about an employee for a review period.

        Args:
            employee_id: Employee to aggregate
            organization_id: Organization the employee must belong to
            timeframe: Review window (defaults to the last 365 days)

        Returns:
            EmployeeContext with objectives, flattened key results and feedback

        Raises:
            NotFoundError: If the employee does not resolve
        """
        employee = await self.resolve_employee(employee_id, organization_id)
        return await self.build_context(employee, timeframe)

    async def build_context(
        self,
        employee: EmployeeProfile,
        timeframe: Optional[Timeframe] = None
    ) -> EmployeeContext:
        """Collect signals for an already-resolved employee."""
        timeframe = timeframe or Timeframe.last_days(settings.DEFAULT_TIMEFRAME_DAYS)
        okrs, feedback = await self.collect_signals(employee.id, timeframe)

        key_results = [kr for objective in okrs for kr in objective.key_results]

        logger.info(
            f"Gathered context for employee {employee.id}: "
            f"{len(okrs)} objectives, {len(key_results)} key results, "
            f"{len(feedback)} feedback items"
        )

        return EmployeeContext(
            employee=employee,
            okrs=okrs,
            key_results=key_results,
            feedback=feedback,
            timeframe=timeframe
        )
