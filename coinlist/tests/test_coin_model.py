from __future__ import annotations

import pytest
from pydantic import ValidationError

from coinlist.models.coin import Coin
from coinlist.services.fixtures import SAMPLE_COINS
from coinlist.utils.formatting import format_usd


def test_coin_is_immutable():
    coin = SAMPLE_COINS[0]
    with pytest.raises(ValidationError):
        coin.current_price = 1.0


def test_display_helpers():
    btc, eth = SAMPLE_COINS
    assert btc.display_symbol == "BTC"
    assert eth.display_symbol == "ETH"
    assert btc.display_price == "$20,000.00"


def test_id_must_not_be_empty():
    with pytest.raises(ValidationError):
        Coin(id="", symbol="x", name="X", image="", current_price=1.0)


def test_image_is_not_validated():
    coin = Coin(id="x", symbol="x", name="X", image="not really a url", current_price=0.0)
    assert coin.image == "not really a url"


def test_integer_price_is_accepted():
    coin = Coin.model_validate_json('{"id":"x","symbol":"x","name":"X","image":"","current_price":3}')
    assert coin.current_price == 3.0


@pytest.mark.parametrize(
    "amount, expected",
    [
        (20000.0, "$20,000.00"),
        (1500, "$1,500.00"),
        (0.0, "$0.00"),
        (0.999, "$1.00"),
        (0.000012, "$0.000012"),
        (-1.5, "-$1.50"),
        (1234567.891, "$1,234,567.89"),
    ],
)
def test_format_usd(amount, expected):
    assert format_usd(amount) == expected
