from fastapi import APIRouter, Request, HTTPException, Depends
from fastapi.responses import JSONResponse
from typing import Optional
from pydantic import BaseModel
from datetime import datetime
import logging
import uuid

from database.DB import get_db
from helpers.TeamRuleResolver import resolve_policy
from helpers.EventFormSchema import resolve_field_schema
from models.models import Event
from .dependencies import require_admin, require_db

router = APIRouter()
logger = logging.getLogger(__name__)


# Pydantic models
class EventCreate(BaseModel):
    title: str
    category: Optional[str] = None
    status: Optional[str] = "open"
    payment_link: Optional[str] = None


class EventUpdate(BaseModel):
    title: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
    payment_link: Optional[str] = None


async def load_event(db, event_id: str) -> Event:
    """Event lookup collaborator. Raises 404 when the event does not exist."""
    document = await db.find_one("events", {"event_id": event_id})
    if not document:
        raise HTTPException(status_code=404, detail="Event not found")
    return Event(**document)


@router.post('')
async def create_event(event_data: EventCreate, admin_user: dict = Depends(require_admin), db = Depends(get_db)):
    """Create a new event (Admin only)"""
    require_db(db)
    try:
        event = {
            "event_id": str(uuid.uuid4()),
            "title": event_data.title,
            "category": event_data.category,
            "status": event_data.status,
            "payment_link": event_data.payment_link,
            "created_at": datetime.utcnow(),
            "created_by": admin_user.get("email"),
        }

        result = await db.add("events", event)
        if result["status"] != 200:
            raise HTTPException(status_code=500, detail="Failed to create event")

        logger.info("Event %s created by %s", event_data.title, admin_user.get("email"))
        return JSONResponse(status_code=201, content={"message": "Event created successfully", "event": result["data"]})

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating event: {str(e)}")


@router.get('')
async def get_events(db = Depends(get_db)):
    """List all events"""
    require_db(db)
    try:
        result = await db.find_many("events", {}, sort=[("created_at", -1)])
        return JSONResponse(content={"events": result.get("data", [])})
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching events: {str(e)}")


@router.get('/{event_id}')
async def get_event(event_id: str, db = Depends(get_db)):
    """Get a single event"""
    require_db(db)
    event = await load_event(db, event_id)
    return JSONResponse(content={"event": event.model_dump(mode="json")})


@router.get('/{event_id}/form')
async def get_event_form(event_id: str, db = Depends(get_db)):
    """Team rules and event-specific inputs the registration form should render"""
    require_db(db)
    event = await load_event(db, event_id)
    policy = resolve_policy(event.title)
    fields = resolve_field_schema(event.title)

    return JSONResponse(content={
        "event_id": event.event_id,
        "title": event.title,
        "policy": policy.model_dump(),
        "size_choices": policy.size_choices(),
        "size_locked": policy.fixed_size,
        "fields": [field.model_dump() for field in fields],
    })


@router.put('/{event_id}')
async def update_event(event_id: str, event_data: EventUpdate, admin_user: dict = Depends(require_admin), db = Depends(get_db)):
    """Update an existing event (Admin only)"""
    require_db(db)
    try:
        update_data = event_data.model_dump(exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")

        update_data["updated_at"] = datetime.utcnow()
        update_data["updated_by"] = admin_user.get("email")

        result = await db.update("events", {"event_id": event_id}, {"$set": update_data})
        if result["matched_count"] == 0:
            raise HTTPException(status_code=404, detail="Event not found")

        updated_event = await db.find_one("events", {"event_id": event_id})
        return JSONResponse(content={"message": "Event updated successfully", "event": updated_event})

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating event: {str(e)}")


@router.delete('/{event_id}')
async def delete_event(event_id: str, admin_user: dict = Depends(require_admin), db = Depends(get_db)):
    """Delete an event (Admin only)"""
    require_db(db)
    try:
        result = await db.delete("events", {"event_id": event_id})
        if result["deleted_count"] == 0:
            raise HTTPException(status_code=404, detail="Event not found")

        return JSONResponse(content={"message": "Event deleted successfully"})

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting event: {str(e)}")
