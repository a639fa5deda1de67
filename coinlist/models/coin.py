"""Pydantic model for one row of the CoinGecko markets payload."""

from pydantic import BaseModel, ConfigDict, Field

from coinlist.utils.formatting import format_usd


class Coin(BaseModel):
    """
    Immutable market snapshot for a single asset.

    Only the fields below are read from the payload; everything else the
    endpoint returns (sparkline, market cap, ...) is ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", strict=True)

    id: str = Field(min_length=1)
    symbol: str
    name: str
    image: str
    current_price: float

    @property
    def display_symbol(self) -> str:
        return self.symbol.upper()

    @property
    def display_price(self) -> str:
        return format_usd(self.current_price)
