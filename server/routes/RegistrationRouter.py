from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import JSONResponse, StreamingResponse
from datetime import datetime
import io
import logging
import uuid

from config.config import EXPORT_TIMEZONE, RECENT_REGISTRATION_DAYS, TOP_INSTITUTIONS_LIMIT
from database.DB import get_db
from helpers.EventFormSchema import build_registration, resolve_field_schema, validate_required_fields
from helpers.ExcelExporter import export_registrations
from helpers.RegistrationErrors import RegistrationError, SubmissionError, ValidationError
from helpers.RegistrationFlattener import compute_stats
from helpers.TeamRuleResolver import reconcile_draft, resolve_policy, validate_submission
from models.models import RegistrationDraft, RegistrationRecord, RegistrationSubmission
from .EventRouter import load_event
from .dependencies import require_admin, require_db, to_http_exception

router = APIRouter()
logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
NO_PAYMENT_LINK_MESSAGE = "Payment link not available. Please contact the organizers for payment details."


async def fetch_registrations(db, event_id: str):
    """Registration listing collaborator: stored records for one event, oldest first."""
    result = await db.find_many("registrations", {"event_id": event_id}, sort=[("registered_at", 1)])
    documents = result.get("data", [])
    total_count = await db.count("registrations", {"event_id": event_id})
    return documents, total_count


@router.post('/{event_id}/registrations/reconcile')
async def reconcile_registration_draft(event_id: str, draft: RegistrationDraft, db = Depends(get_db)):
    """Normalize the form's team section against the event's rules"""
    require_db(db)
    event = await load_event(db, event_id)
    policy = resolve_policy(event.title)
    reconcile_draft(policy, draft)
    return JSONResponse(content={"policy": policy.model_dump(), "draft": draft.model_dump()})


@router.post('/{event_id}/registrations')
async def submit_registration(event_id: str, submission: RegistrationSubmission, db = Depends(get_db)):
    """Register a participant (or a team through its leader) for an event"""
    require_db(db)
    event = await load_event(db, event_id)
    policy = resolve_policy(event.title)
    schema = resolve_field_schema(event.title)

    try:
        validate_submission(policy, submission.draft(), submission.agree_to_rules)
        validate_required_fields(schema, submission)
        record = build_registration(event, submission, schema)
    except ValidationError as e:
        logger.info("Registration for %s rejected: %s", event.title, e.message)
        raise to_http_exception(e)

    try:
        existing = await db.find_one("registrations", {"event_id": event.event_id, "email_id": record.email_id})
        if existing:
            raise SubmissionError("You have already registered for this event", status_code=409)

        document = record.model_dump()
        document["registration_id"] = str(uuid.uuid4())

        try:
            result = await db.add("registrations", document)
        except Exception as e:
            logger.warning("Registration store unavailable for %s: %s", event.title, e)
            raise SubmissionError() from e

        if result["status"] != 200:
            raise SubmissionError(result.get("message"))

    except SubmissionError as e:
        logger.warning("Registration for %s failed: %s", event.title, e.message)
        raise to_http_exception(e)

    logger.info("Registered %s for %s", record.email_id, event.title)
    return JSONResponse(status_code=201, content={
        "message": "Registration successful",
        "registration": result["data"],
        "payment_link": event.payment_link,
        "payment_message": None if event.payment_link else NO_PAYMENT_LINK_MESSAGE,
    })


@router.get('/{event_id}/registrations')
async def list_registrations(event_id: str, admin_user: dict = Depends(require_admin), db = Depends(get_db)):
    """Registrations for export (Admin only)"""
    require_db(db)
    event_document = await db.find_one("events", {"event_id": event_id})
    if not event_document:
        raise HTTPException(status_code=404, detail="Event not found")

    try:
        documents, total_count = await fetch_registrations(db, event_id)
        return JSONResponse(content={
            "event": event_document,
            "registrations": documents,
            "totalCount": total_count,
        })
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching registrations: {str(e)}")


@router.get('/{event_id}/registrations/stats')
async def registration_stats(event_id: str, admin_user: dict = Depends(require_admin), db = Depends(get_db)):
    """Registration statistics for the export dialog (Admin only)"""
    require_db(db)
    await load_event(db, event_id)

    try:
        documents, _ = await fetch_registrations(db, event_id)
        records = [RegistrationRecord(**doc) for doc in documents]
        stats = compute_stats(records, datetime.utcnow(), RECENT_REGISTRATION_DAYS, TOP_INSTITUTIONS_LIMIT)
        return JSONResponse(content=stats)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error computing registration stats: {str(e)}")


@router.get('/{event_id}/registrations/export')
async def export_registrations_xlsx(event_id: str, admin_user: dict = Depends(require_admin), db = Depends(get_db)):
    """Download the registrations of an event as an Excel workbook (Admin only)"""
    require_db(db)
    event = await load_event(db, event_id)

    try:
        documents, total_count = await fetch_registrations(db, event_id)
        records = [RegistrationRecord(**doc) for doc in documents]
        filename, content = export_registrations(event, event.title, records, total_count, datetime.utcnow(), EXPORT_TIMEZONE)
    except RegistrationError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("Unexpected failure exporting registrations for %s", event.title)
        raise HTTPException(status_code=500, detail="Failed to export data. Please try again.")

    return StreamingResponse(
        io.BytesIO(content),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
