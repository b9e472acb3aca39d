"""Password Strength — requirement checks and the 0-4 score."""

from agrilink.core.password_strength import calculate_strength, check_requirements


def test_empty_password():
    result = calculate_strength("")
    assert result.score == 0
    assert result.label == "Weak"
    assert result.feedback == []
    assert result.is_valid is False


def test_short_lowercase_password_is_weak():
    result = calculate_strength("abc")
    assert result.score == 1
    assert result.label == "Weak"
    assert "At least 8 characters" in result.feedback
    assert "One uppercase letter" in result.feedback


def test_half_points_round_up():
    # 8 chars (1) + lowercase (0.5) = 1.5 -> 2
    result = calculate_strength("abcdefgh")
    assert result.score == 2
    assert result.label == "Fair"


def test_all_requirements_met():
    result = calculate_strength("Abcdefg1!")
    assert result.score == 3
    assert result.label == "Good"
    assert result.feedback == []
    assert result.is_valid is True


def test_score_capped_at_four():
    result = calculate_strength("Abcdefghijklmnop1!")
    assert result.score == 4
    assert result.label == "Strong"


def test_check_requirements_keys():
    assert check_requirements("Passw0rd!") == {
        "min_length": True,
        "has_uppercase": True,
        "has_lowercase": True,
        "has_number": True,
        "has_special_char": True,
    }
    assert check_requirements("password")["has_number"] is False
