"""XP amounts awarded for each kind of learning activity."""

from dataclasses import dataclass, field

from progression.domain.review.entities.review_record import ReviewMode

# (minimum streak, bonus), highest threshold first
DEFAULT_STREAK_BONUSES: tuple[tuple[int, int], ...] = (
    (100, 100),
    (30, 30),
    (14, 20),
    (7, 15),
    (3, 10),
)


@dataclass(frozen=True)
class XpRewardPolicy:
    review_rewards: dict[ReviewMode, int] = field(
        default_factory=lambda: {
            ReviewMode.FLASHCARD: 10,
            ReviewMode.QUIZ: 15,
            ReviewMode.RECALL: 20,
        }
    )
    lesson_answer_reward: int = 5
    default_lesson_reward: int = 10
    perfect_bonus: int = 25
    excellent_bonus: int = 10
    good_bonus: int = 5
    streak_bonuses: tuple[tuple[int, int], ...] = DEFAULT_STREAK_BONUSES

    def for_review(self, mode: ReviewMode, is_correct: bool) -> int:
        if not is_correct:
            return 0
        return self.review_rewards.get(mode, 0)

    def for_lesson_answer(self, is_correct: bool) -> int:
        return self.lesson_answer_reward if is_correct else 0

    def for_lesson_completion(self, xp_reward: int | None, accuracy: int) -> int:
        """Lesson base reward plus an accuracy bonus (100 -> perfect, >90, >80)."""
        base = self.default_lesson_reward if xp_reward is None else xp_reward
        if accuracy >= 100:
            return base + self.perfect_bonus
        if accuracy > 90:
            return base + self.excellent_bonus
        if accuracy > 80:
            return base + self.good_bonus
        return base

    def for_streak(self, streak: int) -> int:
        for threshold, bonus in self.streak_bonuses:
            if streak >= threshold:
                return bonus
        return 0
