from typing import List, Optional

from sqlalchemy.orm import Session

from merge_api.models.user.user_model import User, UserRole


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_external_id(db: Session, external_id: str) -> Optional[User]:
    """Resolve the identity provider's opaque id to a stored user."""
    if not external_id:
        return None
    return db.query(User).filter(User.external_id == external_id).first()


def get_user_role(db: Session, external_id: str) -> Optional[UserRole]:
    user = get_user_by_external_id(db, external_id)
    return user.role if user else None


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.id.asc()).all()


def create_anonymous_user(db: Session, name: str) -> User:
    user = User(name=name, role=UserRole.USER, is_anonymous=True, total_games=0, average_score=0.0)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def rename_user(db: Session, user: User, name: str) -> User:
    user.name = name
    db.commit()
    db.refresh(user)
    return user


def ensure_admin_user(db: Session, external_id: str, name: str) -> User:
    """Create the admin account bound to ``external_id`` or promote it."""
    user = get_user_by_external_id(db, external_id)
    if user is None:
        user = User(
            name=name,
            external_id=external_id,
            role=UserRole.ADMIN,
            is_anonymous=False,
            total_games=0,
            average_score=0.0,
        )
        db.add(user)
    elif user.role != UserRole.ADMIN:
        user.role = UserRole.ADMIN
    db.commit()
    db.refresh(user)
    return user
