import pytest

from cooking_path.errors import InvalidQuantityToken, UnparsableDuration
from cooking_path.services.quantities import (
    parse_count,
    parse_minutes,
    scale_ingredient_line,
    scale_quantity_token,
)


def _parse_back(text: str) -> float:
    if "/" in text:
        numerator, denominator = text.split("/")
        return int(numerator) / int(denominator)
    return float(text)


def test_parse_minutes_takes_first_integer():
    assert parse_minutes("25 minutes") == 25
    assert parse_minutes("about 1 hour 30 minutes") == 1
    assert parse_minutes("Prep: 15-20 min") == 15


def test_parse_minutes_default():
    assert parse_minutes("a while", 10) == 10
    assert parse_minutes(None, 20) == 20
    assert parse_minutes("", 0) == 0


def test_parse_minutes_without_default_raises():
    with pytest.raises(UnparsableDuration):
        parse_minutes("until golden")


def test_parse_count():
    assert parse_count("Serves 4", 2) == 4
    assert parse_count("Serves 2-4", 2) == 2
    assert parse_count(None, 2) == 2


@pytest.mark.parametrize(
    "token, factor, expected",
    [
        ("2", 1.5, "3"),
        ("3", 0.5, "1.5"),
        ("1.5", 3, "4.5"),
        ("1.5", 2, "3"),
        ("1", 0.5, "1/2"),
        ("0.5", 0.5, "1/4"),
        ("1/2", 0.5, "1/4"),
        ("1/2", 2, "1"),
        ("3/4", 1, "3/4"),
        ("1/4", 3, "3/4"),
        ("1/2", 3, "1.5"),
        ("1/3", 1, "0.33"),
        ("2/3", 2, "1.33"),
    ],
)
def test_scale_quantity_token(token, factor, expected):
    assert scale_quantity_token(token, factor) == expected


def test_scale_quantity_token_never_uses_other_denominators():
    # 1/3 is under 1 but neither a half nor a quarter
    assert "/" not in scale_quantity_token("1/6", 2)
    assert scale_quantity_token("1/8", 2) == "1/4"


@pytest.mark.parametrize("token", ["1/2", "1/3", "2/3", "3/4", "5/8", "7/16"])
@pytest.mark.parametrize("factor", [0.5, 1.5, 2, 3, 4])
def test_scaled_fraction_parses_back_close(token, factor):
    numerator, denominator = token.split("/")
    expected = int(numerator) / int(denominator) * factor
    assert abs(_parse_back(scale_quantity_token(token, factor)) - expected) <= 0.01


def test_zero_denominator_is_invalid():
    with pytest.raises(InvalidQuantityToken) as exc_info:
        scale_quantity_token("1/0", 2)
    assert exc_info.value.token == "1/0"


def test_scale_ingredient_line_scales_every_number():
    assert scale_ingredient_line("2 1/4 cups flour", 2) == "4 1/2 cups flour"
    assert scale_ingredient_line("1/2 tbsp salt", 3) == "1.5 tbsp salt"
    assert scale_ingredient_line("1.5 kg beef, cut into 2 cm cubes", 2) == "3 kg beef, cut into 4 cm cubes"


def test_scale_ingredient_line_leaves_text_alone():
    assert scale_ingredient_line("salt to taste", 2) == "salt to taste"


def test_scale_ingredient_line_keeps_invalid_token():
    assert scale_ingredient_line("1/0 cup mystery and 2 eggs", 2) == "1/0 cup mystery and 4 eggs"
