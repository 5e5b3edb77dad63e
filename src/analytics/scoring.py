from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Callable, Dict, Literal, Optional, Sequence

Tier = Literal["GREEN", "YELLOW", "RED", "NO_TARGET"]
PhraseChooser = Callable[[Sequence[str]], str]


@dataclass(frozen=True)
class TierThresholds:
    green: float = 1.00
    yellow: float = 0.70


@dataclass(frozen=True)
class TierStyle:
    status: str
    label: str
    color_class: str
    phrases: tuple[str, ...]


@dataclass(frozen=True)
class StatusResult:
    ratio: float
    percentage: float
    tier: Tier
    status: str
    label: str
    color_class: str
    phrase: str


DEFAULT_THRESHOLDS = TierThresholds()

TIER_STYLES: Dict[Tier, TierStyle] = {
    "GREEN": TierStyle(
        status="Excellent",
        label="ممتاز",
        color_class="text-green-500 bg-green-100",
        phrases=(
            "عمل رائع! استمر في تحقيق الأهداف وأكثر.",
            "أداء ممتاز يفوق التوقعات، أنت نجم حقيقي!",
        ),
    ),
    "YELLOW": TierStyle(
        status="Average",
        label="متوسط",
        color_class="text-yellow-500 bg-yellow-100",
        phrases=(
            "أداء جيد! على بُعد خطوات من الهدف، يمكنك فعلها.",
            "استمر في التقدم، القليل من الجهد الإضافي يُحدث فرقاً كبيراً.",
        ),
    ),
    "RED": TierStyle(
        status="Poor",
        label="ضعيف",
        color_class="text-red-500 bg-red-100",
        phrases=(
            "ابدأ بقوة اليوم! الأهداف في متناول يدك.",
            "كل يوم هو بداية جديدة، ركز لتحقيق التارقت!",
        ),
    ),
    "NO_TARGET": TierStyle(
        status="No Target",
        label="لا يوجد هدف",
        color_class="text-gray-500 bg-gray-100",
        phrases=("ننتظر تحديد الأهداف.",),
    ),
}


def _has_target(target: Optional[float]) -> bool:
    if target is None:
        return False
    try:
        value = float(target)
    except (TypeError, ValueError):
        return False
    return not math.isnan(value) and value != 0


def classify(ratio: float, thresholds: TierThresholds = DEFAULT_THRESHOLDS) -> Tier:
    if ratio >= thresholds.green:
        return "GREEN"
    if ratio >= thresholds.yellow:
        return "YELLOW"
    return "RED"


def score(
    actual: float,
    target: Optional[float],
    *,
    thresholds: TierThresholds = DEFAULT_THRESHOLDS,
    choose: PhraseChooser = random.choice,
) -> StatusResult:
    """Rate ``actual`` against ``target``.

    The phrase is drawn from the tier's set on every call, so identical inputs
    can return different phrases. Negative actuals are not rejected here.
    """
    if not _has_target(target):
        style = TIER_STYLES["NO_TARGET"]
        return StatusResult(
            ratio=0.0,
            percentage=0.0,
            tier="NO_TARGET",
            status=style.status,
            label=style.label,
            color_class=style.color_class,
            phrase=style.phrases[0],
        )

    ratio = actual / float(target)
    tier = classify(ratio, thresholds)
    style = TIER_STYLES[tier]
    return StatusResult(
        ratio=ratio,
        percentage=ratio * 100,
        tier=tier,
        status=style.status,
        label=style.label,
        color_class=style.color_class,
        phrase=choose(style.phrases),
    )
