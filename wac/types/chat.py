import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, model_validator

from .base import CamelModel
from .intent import RoutePreference
from .talk_to_invest import ActionType, TalkToInvestResponse, enforce_action_gate

Role = Literal["user", "assistant"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChatMessage(CamelModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    content: str
    role: Role
    timestamp: datetime = Field(default_factory=_utcnow)
    action_data: Optional[Dict[str, Any]] = None
    action_response: Optional[TalkToInvestResponse] = None
    investment: Optional[Dict[str, Any]] = None
    bot: Optional[Dict[str, Any]] = None


class ChatThread(CamelModel):
    id: str
    title: str
    messages: List[ChatMessage] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class UserPreferences(CamelModel):
    risk_tolerance: Literal["conservative", "moderate", "aggressive"] = "moderate"
    preferred_speed: RoutePreference = "cheapest"
    max_slippage: float = 0.5
    preferred_chains: List[int] = Field(default_factory=list)


class MarketConditions(CamelModel):
    volatility_level: Literal["low", "medium", "high"] = "medium"
    gas_environment: Literal["low", "medium", "high"] = "medium"
    market_sentiment: Literal["bullish", "bearish", "neutral"] = "neutral"
    major_events: List[str] = Field(default_factory=list)


class ChatContext(CamelModel):
    previous_actions: List[str] = Field(default_factory=list)
    user_preferences: UserPreferences = Field(default_factory=UserPreferences)
    market_conditions: MarketConditions = Field(default_factory=MarketConditions)


class IntelligentChatRequest(CamelModel):
    user_prompt: str = Field(min_length=1)
    wallet_address: Optional[str] = None
    thread_id: Optional[str] = None
    context: Optional[ChatContext] = None


class IntelligentChatResponse(CamelModel):
    reply: str
    action_response: Optional[TalkToInvestResponse] = None
    requires_action: bool = False
    reasoning: str = ""
    recommendations: List[str] = Field(default_factory=list)
    risk_warnings: List[str] = Field(default_factory=list)
    market_insights: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _gate_action(self) -> "IntelligentChatResponse":
        self.action_response = enforce_action_gate(self.action_response, self.requires_action)
        return self


ReplySource = Literal["remote", "local", "static"]


class ChatTurn(CamelModel):
    """One user prompt answered and persisted by the chat session."""

    thread_id: str
    thread_title: str
    message: ChatMessage
    source: ReplySource


class ChatReply(CamelModel):
    """Result of a successful round trip to the remote chat endpoint."""

    reply: str
    action_data: Optional[Dict[str, Any]] = None
    thread_id: Optional[str] = None
    thread_title: Optional[str] = None
    action_response: Optional[TalkToInvestResponse] = None
    requires_action: bool = False
    action_type: Optional[ActionType] = None

    @model_validator(mode="after")
    def _gate_action(self) -> "ChatReply":
        self.action_response = enforce_action_gate(self.action_response, self.requires_action)
        return self


class DeleteThreadsRequest(CamelModel):
    thread_ids: List[str] = Field(min_length=1)


class DeleteThreadsResponse(CamelModel):
    success: bool
    deleted: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)
    local_only: bool = False
