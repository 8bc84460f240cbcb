# app/services/user_service.py
"""
User Directory: maps verified Firebase subjects to local user rows.
The unique constraint on users.firebase_uid is the only arbiter of
concurrent first logins; a lost insert race is resolved by re-reading.
"""

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.user import User
from app.services.exceptions import TransactionFailure
from app.services.identity_service import VerifiedSubject
from app.utils.logger import get_logger

logger = get_logger(__name__)


def find_user_by_uid(db: Session, firebase_uid: str):
    """Find a user by Firebase UID. Returns None if not found."""
    return db.query(User).filter(User.firebase_uid == firebase_uid).first()


def get_or_create_user(db: Session, subject: VerifiedSubject) -> User:
    """Return the user for this subject, creating it on first sight. Existing rows are not modified."""
    user = find_user_by_uid(db, subject.uid)
    if user:
        return user

    user = User(
        firebase_uid=subject.uid,
        email=subject.email,
        name=subject.name or "",
        picture=subject.picture or "",
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Another request registered the same UID between our read and insert
        db.rollback()
        logger.info(f"Concurrent first login for uid={subject.uid}; re-reading")
        user = find_user_by_uid(db, subject.uid)
        if user is None:
            raise TransactionFailure("Error creating user")
        return user
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating user uid={subject.uid}: {e}", exc_info=True)
        raise TransactionFailure("Error creating user") from e

    db.refresh(user)
    logger.info(f"Registered new user {user.id} for uid={subject.uid}")
    return user


def authenticate(db: Session, resolver, token: str) -> User:
    """Verify the token and return the matching local user."""
    subject = resolver.resolve(token)
    return get_or_create_user(db, subject)
