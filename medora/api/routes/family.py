from fastapi import APIRouter, Depends

from medora.api.auth import get_current_user
from medora.api.deps import get_store
from medora.models.domain import FamilyMember, User
from medora.models.schemas import FamilyMemberCreate
from medora.services import InMemoryStore
from medora.utils import NotFoundError

router = APIRouter(prefix="/api/family", tags=["Family"])


@router.get("")
async def list_family(user: User = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    return [m.to_dict() for m in store.list_family(user.id)]


@router.post("", status_code=201)
async def add_family_member(
    request: FamilyMemberCreate,
    user: User = Depends(get_current_user),
    store: InMemoryStore = Depends(get_store),
):
    member = store.add_family_member(FamilyMember(
        user_id=user.id,
        name=request.name,
        relation=request.relation,
        date_of_birth=request.date_of_birth,
        notes=request.notes,
    ))
    return member.to_dict()


@router.delete("/{member_id}")
async def remove_family_member(member_id: str, user: User = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    member = store.get_family_member(member_id)
    if member is None or member.user_id != user.id:
        raise NotFoundError("Family member not found", resource="family_member", details={"id": member_id})
    store.delete_family_member(member.id)
    return {"message": "Family member removed"}
