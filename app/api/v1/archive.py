"""Archive record endpoint: delete an archived story."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.schemas.auth import CurrentUser
from app.services.archive import delete_archived_story

router = APIRouter()


@router.delete("/{archive_id}", status_code=204)
def delete_archive_record(
    archive_id: int,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> Response:
    """Remove an archive record (manager/admin only). The original story stays gone."""
    delete_archived_story(db, archive_id, user)
    return Response(status_code=204)
