"""Per-batch token usage ledger."""

import logging
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .tokens import CostBreakdown

logger = logging.getLogger(__name__)


class UsageRecord(BaseModel):
    timestamp: datetime
    input_tokens: int
    output_tokens: int
    total_tokens: int
    cost: CostBreakdown
    metadata: dict[str, Any] = Field(default_factory=dict)


class UsageSummary(BaseModel):
    """Aggregate usage for one batch."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_input_tokens: int = 0
    total_output_tokens: int = 0
    total_tokens: int = 0
    total_cost: float = 0.0
    request_count: int = 0
    average_tokens_per_request: int = 0


class UsageLedger:
    """Running totals of token usage and cost.

    One ledger per in-flight batch. Mutation happens on a single event loop
    and never spans an await, so no lock is taken.
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.total_input_tokens = 0
        self.total_output_tokens = 0
        self.total_cost = 0.0
        self.requests: list[UsageRecord] = []

    def add_request(
        self,
        input_tokens: int,
        output_tokens: int,
        cost: CostBreakdown,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self.total_input_tokens += input_tokens
        self.total_output_tokens += output_tokens
        self.total_cost += cost.total_cost
        self.requests.append(
            UsageRecord(
                timestamp=datetime.now(UTC),
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                total_tokens=input_tokens + output_tokens,
                cost=cost,
                metadata=metadata or {},
            )
        )
        logger.debug(
            "Usage recorded",
            extra={"input_tokens": input_tokens, "output_tokens": output_tokens, "cost": cost.total_cost},
        )

    @property
    def request_count(self) -> int:
        return len(self.requests)

    def get_summary(self) -> UsageSummary:
        total_tokens = self.total_input_tokens + self.total_output_tokens
        count = self.request_count
        return UsageSummary(
            total_input_tokens=self.total_input_tokens,
            total_output_tokens=self.total_output_tokens,
            total_tokens=total_tokens,
            total_cost=round(self.total_cost, 4),
            request_count=count,
            average_tokens_per_request=round(total_tokens / count) if count else 0,
        )
