"""University ordering-window settings."""

from sqlalchemy.orm import Session

from hostel_food.models import University, User
from hostel_food.services.audit_service import log_action
from hostel_food.services.scheduling import UniversityTimeConfig


def get_time_config(university: University) -> UniversityTimeConfig:
    return UniversityTimeConfig.from_university(university)


def save_time_config(db: Session, *, university: University, config: UniversityTimeConfig, actor: User) -> UniversityTimeConfig:
    """Persist a validated time config on the university and audit the change."""
    before = _snapshot(get_time_config(university))
    university.timezone = config.timezone
    university.order_cutoff_time = config.order_cutoff_time
    university.max_advance_days = config.max_advance_days
    log_action(
        db,
        actor=actor,
        action_type="settings_update",
        entity_type="university",
        entity_id=university.id,
        before_snapshot=before,
        after_snapshot=_snapshot(config),
    )
    db.commit()
    db.refresh(university)
    return get_time_config(university)


def _snapshot(config: UniversityTimeConfig) -> dict[str, str | int]:
    return {
        "timezone": config.timezone,
        "order_cutoff_time": config.order_cutoff_time,
        "max_advance_days": config.max_advance_days,
    }
