"""Learning progression and spaced-repetition engine."""
