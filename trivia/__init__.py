"""Per-turn decision engine for a conversational trivia quiz."""
