from sqlalchemy import select, delete, update, or_

from .. import db
from ..models import (
    DELETED_USER_EMAIL,
    User,
    SavedRoutine,
    SavedMergedRoutine,
    CourseSwap,
    AskSectionId,
    SwapRequest,
    Vote,
    Review,
    CourseMaterial,
)


def list_users():
    rows = db.session.execute(
        select(User).order_by(User.user_name.asc(), User.email.asc())
    ).scalars().all()
    return [u.to_dict() for u in rows]


def delete_user(email):
    """
    Remove a user and everything they own in one transaction.

    Reviews and course materials survive under the placeholder account;
    routines, swap offers (with asked sections and every request against
    them), requests the user sent or received, and votes are deleted.
    Returns False when the user does not exist.
    """
    user = db.session.get(User, email)
    if user is None:
        return False

    try:
        owned_swaps = select(CourseSwap.swap_id).where(CourseSwap.u_email == email)

        db.session.execute(
            delete(SwapRequest)
            .where(or_(
                SwapRequest.swap_id.in_(owned_swaps),
                SwapRequest.sender_email == email,
                SwapRequest.receiver_email == email,
            ))
            .execution_options(synchronize_session=False)
        )
        db.session.execute(
            delete(AskSectionId)
            .where(AskSectionId.swap_id.in_(owned_swaps))
            .execution_options(synchronize_session=False)
        )
        db.session.execute(
            delete(CourseSwap).where(CourseSwap.u_email == email)
            .execution_options(synchronize_session=False)
        )
        db.session.execute(delete(SavedRoutine).where(SavedRoutine.email == email))
        db.session.execute(delete(SavedMergedRoutine).where(SavedMergedRoutine.email == email))
        db.session.execute(delete(Vote).where(Vote.u_email == email))

        db.session.execute(
            update(Review).where(Review.u_email == email).values(u_email=DELETED_USER_EMAIL)
        )
        db.session.execute(
            update(CourseMaterial).where(CourseMaterial.u_email == email).values(u_email=DELETED_USER_EMAIL)
        )

        db.session.delete(user)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    # Bulk statements bypass the identity map
    db.session.expire_all()
    return True
