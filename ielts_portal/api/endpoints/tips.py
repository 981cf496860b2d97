# ielts_portal/api/endpoints/tips.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ielts_portal.core.security import get_current_mentor
from ielts_portal.db.session import get_db
from ielts_portal.models.tip import Tip
from ielts_portal.models.user import User
from ielts_portal.schemas.tip import TipCreate, TipPublic, TipUpdate
from ielts_portal.services import tip_service

router = APIRouter(prefix="/Tips", tags=["tips"])


def _get_tip_or_404(db: Session, tip_id: int) -> Tip:
    tip = tip_service.get_tip(db, tip_id)
    if not tip:
        raise HTTPException(status_code=404, detail="Tip not found")
    return tip


def _get_own_tip(db: Session, tip_id: int, mentor: User) -> Tip:
    tip = _get_tip_or_404(db, tip_id)
    if tip.mentor_id != mentor.id:
        raise HTTPException(status_code=403, detail="Not allowed to modify this tip")
    return tip


@router.get("/", response_model=List[TipPublic])
def list_tips(db: Session = Depends(get_db)):
    return [tip_service.to_public(db, t) for t in tip_service.list_tips(db)]


@router.get("/{tip_id}", response_model=TipPublic)
def get_tip(tip_id: int, db: Session = Depends(get_db)):
    return tip_service.to_public(db, _get_tip_or_404(db, tip_id))


@router.post("/", response_model=TipPublic, status_code=status.HTTP_201_CREATED)
def create_tip(
    obj_in: TipCreate,
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
):
    tip = tip_service.create_tip(db, mentor=current_mentor, obj_in=obj_in)
    return tip_service.to_public(db, tip)


@router.put("/{tip_id}", response_model=TipPublic)
def update_tip(
    tip_id: int,
    obj_in: TipUpdate,
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
):
    tip = _get_own_tip(db, tip_id, current_mentor)
    tip = tip_service.update_tip(db, tip=tip, obj_in=obj_in)
    return tip_service.to_public(db, tip)


@router.delete("/{tip_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tip(
    tip_id: int,
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
):
    tip_service.delete_tip(db, tip=_get_own_tip(db, tip_id, current_mentor))
