import time
import uuid
from . import db

DELETED_USER_EMAIL = "deleted@g.bracu.ac.bd"

USER_ROLES = ("student", "admin")
SWAP_REQUEST_STATUSES = ("PENDING", "ACCEPTED", "REJECTED")
POST_STATES = ("pending", "published", "rejected")


def epoch_now():
    return int(time.time())


def new_uuid():
    return str(uuid.uuid4())

# ==========================================
# USERS
# ==========================================

class User(db.Model):
    __tablename__ = "userinfo"
    email = db.Column(db.String(255), primary_key=True)
    user_name = db.Column("username", db.String(255), nullable=False)
    user_role = db.Column(
        "userrole",
        db.Enum(*USER_ROLES, name="user_role"),
        nullable=False,
        default="student",
    )
    created_at = db.Column("createdat", db.BigInteger, default=epoch_now)

    @property
    def first_name(self):
        parts = (self.user_name or "").split()
        return parts[0] if parts else None

    def to_dict(self):
        return {
            "email": self.email,
            "userName": self.user_name,
            "userRole": self.user_role,
            "createdAt": self.created_at,
        }

# ==========================================
# ROUTINES
# ==========================================

class SavedRoutine(db.Model):
    __tablename__ = "savedroutine"
    routine_id = db.Column("routineid", db.String(36), primary_key=True, default=new_uuid)
    routine_str = db.Column("routinestr", db.Text, nullable=False)
    routine_name = db.Column("routinename", db.Text)
    email = db.Column(db.String(255), db.ForeignKey("userinfo.email", ondelete="CASCADE", onupdate="CASCADE"), nullable=False, index=True)
    created_at = db.Column("createdat", db.BigInteger, default=epoch_now)
    semester = db.Column(db.String(16), nullable=False)


class SavedMergedRoutine(db.Model):
    __tablename__ = "savedmergedroutine"
    routine_id = db.Column("routineid", db.String(36), primary_key=True, default=new_uuid)
    # JSON text: [{"friendName": str, "sectionIds": [int, ...]}, ...]
    routine_data = db.Column("routinedata", db.Text, nullable=False)
    email = db.Column(db.String(255), db.ForeignKey("userinfo.email", ondelete="CASCADE", onupdate="CASCADE"), nullable=False, index=True)
    created_at = db.Column("createdat", db.BigInteger, default=epoch_now)
    semester = db.Column(db.String(16), nullable=False)

# ==========================================
# COURSE SWAP
# ==========================================

class CourseSwap(db.Model):
    __tablename__ = "courseswap"
    swap_id = db.Column("swapid", db.String(36), primary_key=True, default=new_uuid)
    is_done = db.Column("isdone", db.Boolean, nullable=False, default=False)
    u_email = db.Column("uemail", db.String(255), db.ForeignKey("userinfo.email", ondelete="CASCADE", onupdate="CASCADE"), nullable=False, index=True)
    get_section_id = db.Column("getsectionid", db.Integer, nullable=False)
    created_at = db.Column("createdat", db.BigInteger, default=epoch_now)
    semester = db.Column(db.String(16))

    asking_sections = db.relationship(
        "AskSectionId",
        backref="swap",
        cascade="all, delete-orphan",
        lazy=True,
    )
    requests = db.relationship(
        "SwapRequest",
        backref="swap",
        cascade="all, delete-orphan",
        lazy=True,
    )


class AskSectionId(db.Model):
    __tablename__ = "asksectionid"
    swap_id = db.Column("swapid", db.String(36), db.ForeignKey("courseswap.swapid", ondelete="CASCADE", onupdate="CASCADE"), primary_key=True)
    ask_section_id = db.Column("asksectionid", db.Integer, primary_key=True)


class SwapRequest(db.Model):
    __tablename__ = "swaprequest"
    request_id = db.Column("requestid", db.String(36), primary_key=True, default=new_uuid)
    swap_id = db.Column("swapid", db.String(36), db.ForeignKey("courseswap.swapid", ondelete="CASCADE", onupdate="CASCADE"), nullable=False, index=True)
    sender_email = db.Column("senderemail", db.String(255), db.ForeignKey("userinfo.email", ondelete="CASCADE", onupdate="CASCADE"), nullable=False, index=True)
    receiver_email = db.Column("receiveremail", db.String(255), db.ForeignKey("userinfo.email", ondelete="CASCADE", onupdate="CASCADE"), nullable=False, index=True)
    status = db.Column(
        db.Enum(*SWAP_REQUEST_STATUSES, name="swaprequest_status"),
        nullable=False,
        default="PENDING",
    )
    is_read = db.Column("isread", db.Boolean, nullable=False, default=False)
    created_at = db.Column("createdat", db.BigInteger, default=epoch_now)

# ==========================================
# FACULTY
# ==========================================

class Faculty(db.Model):
    __tablename__ = "faculty"
    faculty_id = db.Column("facultyid", db.String(36), primary_key=True, default=new_uuid)
    faculty_name = db.Column("facultyname", db.Text, nullable=False)
    email = db.Column(db.String(255), nullable=False)
    img_url = db.Column("imgurl", db.Text)

    initials = db.relationship(
        "FacultyInitial",
        backref="faculty",
        cascade="all, delete-orphan",
        lazy=True,
    )

    def to_dict(self):
        return {
            "facultyId": self.faculty_id,
            "facultyName": self.faculty_name,
            "email": self.email,
            "imgUrl": self.img_url,
        }


class FacultyInitial(db.Model):
    __tablename__ = "initial"
    faculty_id = db.Column("facultyid", db.String(36), db.ForeignKey("faculty.facultyid", ondelete="CASCADE", onupdate="CASCADE"), primary_key=True, index=True)
    faculty_initial = db.Column("facultyinitial", db.String(32), primary_key=True)

# ==========================================
# ACTIVITY FEED (REVIEWS / MATERIALS / VOTES)
# ==========================================

class Review(db.Model):
    __tablename__ = "reviews"
    review_id = db.Column("reviewid", db.String(36), primary_key=True, default=new_uuid)
    faculty_id = db.Column("facultyid", db.String(36), db.ForeignKey("faculty.facultyid", ondelete="CASCADE", onupdate="CASCADE"), nullable=False)
    u_email = db.Column("uemail", db.String(255), nullable=False, default=DELETED_USER_EMAIL, index=True)
    is_anon = db.Column("isanon", db.Boolean, nullable=False, default=False)
    semester = db.Column(db.String(16), nullable=False)
    behaviour_rating = db.Column("behaviourrating", db.Integer, nullable=False)
    teaching_rating = db.Column("teachingrating", db.Integer, nullable=False)
    marking_rating = db.Column("markingrating", db.Integer, nullable=False)
    section = db.Column(db.String(16), nullable=False)
    course_code = db.Column("coursecode", db.String(16), nullable=False)
    review_description = db.Column("reviewdescription", db.Text)
    post_state = db.Column(
        "poststate",
        db.Enum(*POST_STATES, name="review_state"),
        nullable=False,
        default="pending",
    )
    created_at = db.Column("createdat", db.BigInteger, default=epoch_now)

    def to_dict(self):
        return {
            "reviewId": self.review_id,
            "facultyId": self.faculty_id,
            "uEmail": self.u_email,
            "isAnon": self.is_anon,
            "semester": self.semester,
            "behaviourRating": self.behaviour_rating,
            "teachingRating": self.teaching_rating,
            "markingRating": self.marking_rating,
            "section": self.section,
            "courseCode": self.course_code,
            "reviewDescription": self.review_description,
            "postState": self.post_state,
            "createdAt": self.created_at,
        }


class CourseMaterial(db.Model):
    __tablename__ = "coursematerials"
    material_id = db.Column("materialid", db.String(36), primary_key=True, default=new_uuid)
    u_email = db.Column("uemail", db.String(255), default=DELETED_USER_EMAIL, index=True)
    material_url = db.Column("materialurl", db.Text, nullable=False)
    created_at = db.Column("createdat", db.BigInteger, default=epoch_now)
    course_code = db.Column("coursecode", db.String(16), nullable=False)
    semester = db.Column(db.String(16), nullable=False)
    post_state = db.Column(
        "poststate",
        db.Enum(*POST_STATES, name="post_state"),
        nullable=False,
        default="pending",
    )
    post_description = db.Column("postdescription", db.Text, nullable=False)

    def to_dict(self):
        return {
            "materialId": self.material_id,
            "uEmail": self.u_email,
            "materialUrl": self.material_url,
            "createdAt": self.created_at,
            "courseCode": self.course_code,
            "semester": self.semester,
            "postState": self.post_state,
            "postDescription": self.post_description,
        }


class Target(db.Model):
    __tablename__ = "targets"
    uuid = db.Column(db.String(36), primary_key=True, default=new_uuid)
    kind = db.Column(db.String(32), nullable=False)  # review, material
    ref_id = db.Column("refid", db.String(36), nullable=False, unique=True)


class Vote(db.Model):
    __tablename__ = "votes"
    u_email = db.Column("uemail", db.String(255), db.ForeignKey("userinfo.email", ondelete="CASCADE", onupdate="CASCADE"), primary_key=True)
    target_uuid = db.Column("targetuuid", db.String(36), db.ForeignKey("targets.uuid", ondelete="CASCADE", onupdate="CASCADE"), primary_key=True)
    value = db.Column(db.Integer, nullable=False)
    created_at = db.Column("createdat", db.BigInteger, default=epoch_now)

# ==========================================
# SERVICE STATUS (mutated out-of-band)
# ==========================================

class ServiceStatus(db.Model):
    __tablename__ = "services"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    message = db.Column(db.String(1000), nullable=False)
    created_at = db.Column(db.DateTime, server_default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now(), nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "isActive": self.is_active,
            "message": self.message,
        }
