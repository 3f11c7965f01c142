import pytest

from shopfront.app.common.money import format_amount, format_money, to_minor


@pytest.mark.parametrize(
    "minor, currency, expected",
    [
        (5000, "USD", "$50.00"),
        (123456789, "USD", "$1,234,567.89"),
        (0, "EUR", "€0.00"),
        (1500, "JPY", "¥1,500"),
        (1000, "CHF", "CHF 10.00"),
        (-250, "GBP", "-£2.50"),
    ],
)
def test_format_money(minor, currency, expected):
    assert format_money(minor, currency) == expected


def test_to_minor():
    assert to_minor("10.0", "USD") == 1000
    assert to_minor("1299.95", "USD") == 129995
    assert to_minor("0.005", "USD") == 1
    assert to_minor("1.234", "KWD") == 1234

    with pytest.raises(ValueError):
        to_minor("ten", "USD")
    with pytest.raises(ValueError):
        to_minor("NaN", "USD")


def test_format_amount():
    assert format_amount("25.0", "USD") == "$25.00"
