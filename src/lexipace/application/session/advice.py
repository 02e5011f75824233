"""Static message and icon tables for session advice."""

DEFAULT_ICON = "💡"

ADVICE_ICONS: dict[str, str] = {
    "slow_down": "🐌",
    "speed_training": "⚡",
    "review_focus": "📚",
    "learning_strategy": "🧘",
    "speed_improvement": "⚡",
    "encouragement": "🌟",
    "time_advice": "🌅",
}

ADVICE_MESSAGES: dict[str, str] = {
    "learning_strategy": "Take it slower; repetition helps words settle into memory.",
    "speed_improvement": "Try recalling the spelling and sound of each word to answer faster.",
    "encouragement": "Seven days in a row! Keep the habit going.",
    "time_advice": "Mornings are a great time to study. Make the most of it!",
}

REASON_REVIEW_DUE = "review_due"
REASON_NEW_HIGH_FREQUENCY = "new_high_frequency"
REASON_CAUGHT_UP = "caught_up"

REASON_MESSAGES: dict[str, str] = {
    REASON_REVIEW_DUE: "Some words are due for review. Revisit them before they fade.",
    REASON_NEW_HIGH_FREQUENCY: "Learn these high-frequency words next for the biggest payoff.",
    REASON_CAUGHT_UP: "All caught up: nothing is due and no new words remain.",
}


def icon_for(advice_type: str) -> str:
    return ADVICE_ICONS.get(advice_type, DEFAULT_ICON)
