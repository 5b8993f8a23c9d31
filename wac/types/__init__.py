from .base import CamelModel
from .chat import (
    ChatContext,
    ChatMessage,
    ChatReply,
    ChatThread,
    ChatTurn,
    IntelligentChatRequest,
    IntelligentChatResponse,
    MarketConditions,
    UserPreferences,
)
from .intent import SwapIntent
from .news import NewsItem
from .portfolio import (
    ChainBalance,
    MarketContext,
    PortfolioAnalysis,
    PortfolioRecommendation,
    RiskAssessment,
)
from .routes import (
    CostBreakdown,
    RouteAnalysis,
    RouteOption,
    RouteRiskAssessment,
    RouteStep,
    TimeBreakdown,
)
from .talk_to_invest import (
    ActionMetric,
    ActionSummary,
    ExecutionData,
    PrimaryAction,
    RiskWarning,
    TalkToInvestResponse,
)

__all__ = [
    "CamelModel",
    "ChatContext",
    "ChatMessage",
    "ChatReply",
    "ChatThread",
    "ChatTurn",
    "IntelligentChatRequest",
    "IntelligentChatResponse",
    "MarketConditions",
    "UserPreferences",
    "SwapIntent",
    "NewsItem",
    "ChainBalance",
    "MarketContext",
    "PortfolioAnalysis",
    "PortfolioRecommendation",
    "RiskAssessment",
    "CostBreakdown",
    "RouteAnalysis",
    "RouteOption",
    "RouteRiskAssessment",
    "RouteStep",
    "TimeBreakdown",
    "ActionMetric",
    "ActionSummary",
    "ExecutionData",
    "PrimaryAction",
    "RiskWarning",
    "TalkToInvestResponse",
]
