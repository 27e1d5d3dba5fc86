from collections import defaultdict

from sqlalchemy import select

from .. import db
from ..models import CourseSwap, AskSectionId, SwapRequest, User, epoch_now

DECIDED_STATUSES = ("ACCEPTED", "REJECTED")


def group_asking_sections(ask_rows):
    """Map swap id -> sorted list of asked section ids."""
    grouped = defaultdict(list)
    for swap_id, section_id in ask_rows:
        grouped[swap_id].append(section_id)
    return {k: sorted(v) for k, v in grouped.items()}


def list_swaps(viewer_email=None, include_owner_flag=True):
    """
    Build the swap board from two bulk reads grouped in process.
    Every offer carries an `askingSections` list, empty when it has no asked rows.
    """
    offers = db.session.execute(
        select(CourseSwap).order_by(CourseSwap.created_at.desc())
    ).scalars().all()
    ask_rows = db.session.execute(
        select(AskSectionId.swap_id, AskSectionId.ask_section_id)
    ).all()
    asking = group_asking_sections(ask_rows)

    swaps = []
    for offer in offers:
        item = {
            "swapId": offer.swap_id,
            "isDone": offer.is_done,
            "getSectionId": offer.get_section_id,
            "createdAt": offer.created_at,
            "semester": offer.semester,
            "askingSections": list(asking.get(offer.swap_id, [])),
        }
        if include_owner_flag:
            item["isOwner"] = (viewer_email is not None and viewer_email == offer.u_email)
        swaps.append(item)
    return swaps


def parse_swap_offer(body):
    """
    Validate a swap offer body. Returns (giving_section, asking_sections) or
    raises ValueError with a client-facing message.
    """
    giving = body.get("givingSection")
    asking = body.get("askingSection")
    if not _is_int(giving):
        raise ValueError("givingSection must be an integer section id")
    if asking is None:
        asking = []
    if not isinstance(asking, list):
        raise ValueError("askingSection must be a list of section ids")
    if not all(_is_int(a) for a in asking):
        raise ValueError("askingSection must contain only integer section ids")
    unique = sorted({int(a) for a in asking})
    if int(giving) in unique:
        raise ValueError("A section cannot be swapped for itself")
    return int(giving), unique


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def create_swap_offer(owner_email, giving_section, asking_sections, semester):
    """Offer and its asked sections are written in one transaction."""
    offer = CourseSwap(
        u_email=owner_email,
        get_section_id=giving_section,
        semester=semester,
        created_at=epoch_now(),
    )
    try:
        db.session.add(offer)
        db.session.flush()
        for section_id in asking_sections:
            db.session.add(AskSectionId(swap_id=offer.swap_id, ask_section_id=section_id))
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return offer


def _first_name(name):
    parts = (name or "").split()
    if not parts:
        return "A student"
    first = parts[0]
    return first[:1].upper() + first[1:].lower()


def serialize_request(req, sender_name, get_section_id, viewer_email):
    """
    Shape a swap request for one viewer. Emails are revealed to both sides only
    once accepted; before that only the sender sees who they asked.
    """
    is_receiver = req.receiver_email == viewer_email
    is_sender = req.sender_email == viewer_email

    sender_email = None
    receiver_email = None
    if req.status == "ACCEPTED":
        sender_email = req.sender_email
        receiver_email = req.receiver_email
    elif is_sender:
        receiver_email = req.receiver_email

    return {
        "requestId": req.request_id,
        "swapId": req.swap_id,
        "status": req.status,
        "isRead": req.is_read,
        "createdAt": req.created_at,
        "getSectionId": get_section_id,
        "senderFirstName": _first_name(sender_name),
        "senderEmail": sender_email,
        "receiverEmail": receiver_email,
        "type": "INCOMING" if is_receiver else "OUTGOING",
    }


def list_requests_for(email):
    rows = db.session.execute(
        select(SwapRequest, User.user_name, CourseSwap.get_section_id)
        .outerjoin(User, User.email == SwapRequest.sender_email)
        .outerjoin(CourseSwap, CourseSwap.swap_id == SwapRequest.swap_id)
        .filter((SwapRequest.receiver_email == email) | (SwapRequest.sender_email == email))
        .order_by(SwapRequest.created_at.desc())
    ).all()
    return [serialize_request(req, name, section, email) for req, name, section in rows]
