"""Password Strength — requirement checks and a 0-4 strength score.

Invariants:
    - score is clamped to 0..4; empty password scores 0 with no feedback
    - is_valid requires every requirement; registration only enforces MIN_LENGTH
"""

import re
from dataclasses import dataclass, field

MIN_LENGTH = 8

_SPECIAL = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")
_LABELS = {0: "Weak", 1: "Weak", 2: "Fair", 3: "Good", 4: "Strong"}


@dataclass
class PasswordStrength:
    score: int
    label: str
    feedback: list[str] = field(default_factory=list)
    is_valid: bool = False


def check_requirements(password: str) -> dict[str, bool]:
    return {
        "min_length": len(password) >= MIN_LENGTH,
        "has_uppercase": bool(re.search(r"[A-Z]", password)),
        "has_lowercase": bool(re.search(r"[a-z]", password)),
        "has_number": bool(re.search(r"\d", password)),
        "has_special_char": bool(_SPECIAL.search(password)),
    }


def calculate_strength(password: str) -> PasswordStrength:
    if not password:
        return PasswordStrength(score=0, label="Weak")

    req = check_requirements(password)
    raw = sum(1 for n in (8, 12, 16) if len(password) >= n)
    raw += 0.5 * sum(
        req[k] for k in ("has_uppercase", "has_lowercase", "has_number", "has_special_char")
    )
    # JS Math.round semantics (half rounds up)
    score = min(4, int(raw + 0.5))

    feedback = [
        msg for key, msg in (
            ("min_length", f"At least {MIN_LENGTH} characters"),
            ("has_uppercase", "One uppercase letter"),
            ("has_lowercase", "One lowercase letter"),
            ("has_number", "One number"),
            ("has_special_char", "One special character"),
        )
        if not req[key]
    ]
    return PasswordStrength(
        score=score, label=_LABELS[score], feedback=feedback,
        is_valid=all(req.values()),
    )
