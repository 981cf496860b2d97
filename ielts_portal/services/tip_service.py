# ielts_portal/services/tip_service.py
from typing import List, Optional

from sqlalchemy.orm import Session

from ielts_portal.models.tip import Tip
from ielts_portal.models.user import User
from ielts_portal.schemas.tip import TipAuthor, TipCreate, TipPublic, TipUpdate


def to_public(db: Session, tip: Tip) -> TipPublic:
    mentor = db.get(User, tip.mentor_id) if tip.mentor_id is not None else None
    return TipPublic(
        id=tip.id,
        title=tip.title,
        content=tip.content,
        created_at=tip.created_at,
        mentor=TipAuthor(id=mentor.id, name=mentor.full_name, avatar=mentor.portrait_url)
        if mentor
        else None,
    )


def get_tip(db: Session, tip_id: int) -> Optional[Tip]:
    return db.get(Tip, tip_id)


def list_tips(db: Session) -> List[Tip]:
    return db.query(Tip).order_by(Tip.created_at.desc(), Tip.id.desc()).all()


def create_tip(db: Session, *, mentor: User, obj_in: TipCreate) -> Tip:
    tip = Tip(mentor_id=mentor.id, title=obj_in.title, content=obj_in.content)
    db.add(tip)
    db.commit()
    db.refresh(tip)
    return tip


def update_tip(db: Session, *, tip: Tip, obj_in: TipUpdate) -> Tip:
    for field, value in obj_in.model_dump(exclude_unset=True).items():
        setattr(tip, field, value)
    db.add(tip)
    db.commit()
    db.refresh(tip)
    return tip


def delete_tip(db: Session, *, tip: Tip) -> None:
    db.delete(tip)
    db.commit()
