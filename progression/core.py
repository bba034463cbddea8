from dependency_injector import containers, providers
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from progression.application.common.message_bus import MessageBus
from progression.application.gamification.messages import HeartsRequest, StreakRequest, XpRequest
from progression.application.gamification.services.hearts_service import HeartsService
from progression.application.gamification.services.streak_service import StreakService
from progression.application.gamification.services.xp_service import XpService
from progression.application.gamification.use_cases.hearts_use_case import HeartsUseCase
from progression.application.gamification.use_cases.streak_use_case import StreakUseCase
from progression.application.gamification.use_cases.xp_use_case import XpUseCase
from progression.application.lesson.messages import LessonRequest
from progression.application.lesson.use_cases.lesson_use_case import LessonUseCase
from progression.application.progression.messages import UnlockRequest
from progression.application.progression.services.unlock_service import UnlockService
from progression.application.progression.use_cases.unlock_use_case import UnlockUseCase
from progression.application.review.messages import ReviewSessionRequest, SchedulerRequest
from progression.application.review.services.scheduler_service import SchedulerService
from progression.application.review.services.submission_service import SubmissionService
from progression.application.review.use_cases.review_session_use_case import (
    ReviewSessionUseCase,
)
from progression.application.review.use_cases.scheduler_use_case import SchedulerUseCase
from progression.config import Settings, get_settings
from progression.domain.gamification.services.xp_reward_policy import XpRewardPolicy
from progression.domain.review.entities.review_record import ReviewMode
from progression.domain.review.services.spaced_repetition import SchedulingPolicy
from progression.infrastructure.common.clock import SystemClock
from progression.infrastructure.common.unit_of_work import SQLAlchemyUnitOfWork
from progression.infrastructure.content.repositories.content_repository import ContentRepository
from progression.infrastructure.gamification.repositories.activity_repository import (
    ActivityRepository,
)
from progression.infrastructure.gamification.repositories.hearts_repository import (
    HeartsRepository,
)
from progression.infrastructure.gamification.repositories.xp_repository import XpRepository
from progression.infrastructure.lesson.repositories.lesson_session_repository import (
    LessonSessionRepository,
)
from progression.infrastructure.progression.path_access import RequirementPathAccessPolicy
from progression.infrastructure.progression.repositories.progress_repository import (
    ProgressRepository,
)
from progression.infrastructure.review.repositories.review_repository import ReviewRepository
from progression.infrastructure.review.repositories.struggling_repository import (
    StrugglingRepository,
)
from progression.infrastructure.review.repositories.submission_repository import (
    SubmissionRepository,
)

# Storage failures worth a retry. Integrity and programming errors are bugs.
TRANSIENT_STORAGE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)


def build_reward_policy(settings: Settings) -> XpRewardPolicy:
    return XpRewardPolicy(
        review_rewards={
            ReviewMode.FLASHCARD: settings.XP_REVIEW_FLASHCARD,
            ReviewMode.QUIZ: settings.XP_REVIEW_QUIZ,
            ReviewMode.RECALL: settings.XP_REVIEW_RECALL,
        },
        lesson_answer_reward=settings.XP_LESSON_ANSWER,
        default_lesson_reward=settings.XP_LESSON_DEFAULT,
    )


def build_message_bus(
    unlock: UnlockUseCase,
    hearts: HeartsUseCase,
    streak: StreakUseCase,
    xp: XpUseCase,
    scheduler: SchedulerUseCase,
    review_session: ReviewSessionUseCase,
    lesson: LessonUseCase,
) -> MessageBus:
    """The dispatch table: one request union per component."""
    bus = MessageBus(transient_errors=TRANSIENT_STORAGE_ERRORS)
    bus.register(UnlockRequest, unlock)
    bus.register(HeartsRequest, hearts)
    bus.register(StreakRequest, streak)
    bus.register(XpRequest, xp)
    bus.register(SchedulerRequest, scheduler)
    bus.register(ReviewSessionRequest, review_session)
    bus.register(LessonRequest, lesson)
    return bus


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    # Declare db as a dependency that will be provided at runtime
    db = providers.Dependency(instance_of=Session)

    settings = providers.Callable(get_settings)
    clock = providers.Singleton(SystemClock)

    # Repositories
    content_repository = providers.Factory(ContentRepository, db=db)
    progress_repository = providers.Factory(ProgressRepository, db=db)
    hearts_repository = providers.Factory(HeartsRepository, db=db)
    activity_repository = providers.Factory(ActivityRepository, db=db)
    xp_repository = providers.Factory(XpRepository, db=db)
    review_repository = providers.Factory(ReviewRepository, db=db)
    struggling_repository = providers.Factory(StrugglingRepository, db=db)
    submission_repository = providers.Factory(SubmissionRepository, db=db)
    lesson_session_repository = providers.Factory(LessonSessionRepository, db=db)

    uow = providers.Factory(SQLAlchemyUnitOfWork, db=db)

    # Policies
    path_access_policy = providers.Factory(
        RequirementPathAccessPolicy,
        content_repository=content_repository,
        progress_repository=progress_repository,
        xp_repository=xp_repository,
    )
    scheduling_policy = providers.Factory(
        SchedulingPolicy,
        growth_factor=settings.provided.REVIEW_GROWTH_FACTOR,
        max_interval_days=settings.provided.MAX_INTERVAL_DAYS,
        initial_interval_days=settings.provided.INITIAL_INTERVAL_DAYS,
        struggling_exit_streak=settings.provided.STRUGGLING_EXIT_STREAK,
    )
    reward_policy = providers.Factory(build_reward_policy, settings=settings)

    # Application services
    unlock_service = providers.Factory(
        UnlockService,
        content_repository=content_repository,
        progress_repository=progress_repository,
        path_access_policy=path_access_policy,
    )
    hearts_service = providers.Factory(
        HeartsService,
        hearts_repository=hearts_repository,
        max_hearts=settings.provided.MAX_HEARTS,
        regen_interval=settings.provided.heart_regen_interval,
    )
    streak_service = providers.Factory(
        StreakService,
        activity_repository=activity_repository,
        tz=settings.provided.streak_tz,
    )
    xp_service = providers.Factory(
        XpService,
        xp_repository=xp_repository,
        tz=settings.provided.streak_tz,
    )
    scheduler_service = providers.Factory(
        SchedulerService,
        review_repository=review_repository,
        struggling_repository=struggling_repository,
        policy=scheduling_policy,
    )
    submission_service = providers.Factory(
        SubmissionService,
        submission_repository=submission_repository,
        review_repository=review_repository,
    )

    # Use cases
    unlock_use_case = providers.Factory(UnlockUseCase, unlock_service=unlock_service)
    hearts_use_case = providers.Factory(
        HeartsUseCase, hearts_service=hearts_service, uow=uow, clock=clock
    )
    streak_use_case = providers.Factory(
        StreakUseCase, streak_service=streak_service, clock=clock
    )
    xp_use_case = providers.Factory(
        XpUseCase,
        xp_service=xp_service,
        uow=uow,
        clock=clock,
        tz=settings.provided.streak_tz,
    )
    scheduler_use_case = providers.Factory(
        SchedulerUseCase,
        scheduler_service=scheduler_service,
        content_repository=content_repository,
        uow=uow,
        clock=clock,
        max_limit=settings.provided.MAX_SESSION_LIMIT,
    )
    review_session_use_case = providers.Factory(
        ReviewSessionUseCase,
        scheduler_service=scheduler_service,
        submission_service=submission_service,
        xp_service=xp_service,
        content_repository=content_repository,
        reward_policy=reward_policy,
        uow=uow,
        clock=clock,
        default_limit=settings.provided.DEFAULT_SESSION_LIMIT,
        max_limit=settings.provided.MAX_SESSION_LIMIT,
    )
    lesson_use_case = providers.Factory(
        LessonUseCase,
        unlock_service=unlock_service,
        scheduler_service=scheduler_service,
        submission_service=submission_service,
        hearts_service=hearts_service,
        xp_service=xp_service,
        streak_service=streak_service,
        session_repository=lesson_session_repository,
        reward_policy=reward_policy,
        uow=uow,
        clock=clock,
        session_ttl=settings.provided.lesson_session_ttl,
    )

    message_bus = providers.Factory(
        build_message_bus,
        unlock=unlock_use_case,
        hearts=hearts_use_case,
        streak=streak_use_case,
        xp=xp_use_case,
        scheduler=scheduler_use_case,
        review_session=review_session_use_case,
        lesson=lesson_use_case,
    )


container = Container()
