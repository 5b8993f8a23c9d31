"""Action-first response contract rendered by the chat UI as an actionable card."""

import time
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from .base import CamelModel
from .portfolio import RiskLevel

ActionType = Literal["swap", "bot", "stake", "portfolio", "bridge", "lend"]
MetricStatus = Literal["success", "warning", "error", "neutral"]


def _now_ms() -> int:
    return int(time.time() * 1000)


class ActionSummary(CamelModel):
    emoji: str
    action: str
    primary_details: str


class ActionMetric(CamelModel):
    label: str
    value: str
    status: Optional[MetricStatus] = None
    emoji: Optional[str] = None


class ExecutionData(CamelModel):
    # Swap
    from_token: Optional[str] = None
    to_token: Optional[str] = None
    from_amount: Optional[str] = None
    to_amount: Optional[str] = None
    slippage: Optional[float] = None
    gas_fee: Optional[str] = None
    route: Optional[str] = None
    from_chain: Optional[str] = None
    to_chain: Optional[str] = None

    # Bot
    bot_type: Optional[str] = None
    strategy: Optional[str] = None
    frequency: Optional[str] = None
    budget: Optional[str] = None

    # Staking
    staking_token: Optional[str] = None
    staking_amount: Optional[str] = None
    apy: Optional[float] = None
    lock_period: Optional[str] = None

    estimated_gas: Optional[float] = None
    estimated_time: Optional[float] = None
    chain_id: Optional[int] = None
    user_balance: Optional[str] = None
    balance_status: Optional[MetricStatus] = None


class PrimaryAction(CamelModel):
    text: str
    emoji: str
    disabled: bool = False
    loading: bool = False
    action_type: ActionType
    execution_data: Optional[ExecutionData] = None

    @property
    def executable(self) -> bool:
        return not self.disabled and self.execution_data is not None


class SecondaryAction(CamelModel):
    text: str
    emoji: Optional[str] = None
    action_type: Optional[str] = None


class RiskWarning(CamelModel):
    level: RiskLevel
    message: str


class TechnicalDetails(CamelModel):
    title: str
    content: str
    expandable: bool = True
    contract_addresses: Optional[Dict[str, str]] = None
    additional_info: Optional[Dict[str, Any]] = None


class TalkToInvestResponse(CamelModel):
    type: ActionType
    summary: ActionSummary
    metrics: List[ActionMetric] = Field(default_factory=list)
    primary_action: PrimaryAction
    secondary_actions: Optional[List[SecondaryAction]] = None
    risk_warning: Optional[RiskWarning] = None
    technical_details: Optional[TechnicalDetails] = None
    original_response: Optional[str] = None
    confidence: Optional[float] = None
    processing_time: Optional[float] = None
    timestamp: int = Field(default_factory=_now_ms)

    def disarmed(self) -> "TalkToInvestResponse":
        """Copy whose primary action can no longer be executed by the UI."""
        action = self.primary_action.model_copy(update={"disabled": True, "execution_data": None})
        return self.model_copy(update={"primary_action": action})


def enforce_action_gate(
    response: Optional[TalkToInvestResponse],
    requires_action: bool,
) -> Optional[TalkToInvestResponse]:
    """Strip executable payloads from responses that do not require action."""
    if response is None or requires_action:
        return response
    if response.primary_action.executable or response.primary_action.execution_data is not None:
        return response.disarmed()
    return response
