from typing import Literal, Optional

from pydantic import ConfigDict, Field

from .base import CamelModel

IntentType = Literal["swap", "general"]
RoutePreference = Literal["cheapest", "fastest", "balanced"]


class SwapIntent(CamelModel):
    model_config = ConfigDict(frozen=True)

    type: IntentType = Field(description="Whether the prompt asks for a swap")
    prompt: str = Field(description="Original user prompt")
    from_token: Optional[str] = Field(default=None, description="Token being sold")
    to_token: Optional[str] = Field(default=None, description="Token being bought")
    amount: Optional[float] = Field(default=None, description="Requested amount")
    preference: Optional[RoutePreference] = Field(default=None, description="Route ranking preference")
    from_chain: Optional[int] = Field(default=None, description="Source chain id")
    to_chain: Optional[int] = Field(default=None, description="Destination chain id")

    @property
    def is_swap(self) -> bool:
        return self.type == "swap"
