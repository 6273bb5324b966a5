"""
Incident API Routes

Endpoints driving the incident report wizard for the current session.
"""

import logging
from typing import List
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response, StreamingResponse

from incident_report_service.config.settings import settings
from incident_report_service.core.errors import (
    ExportError,
    GenerationInProgressError,
    InvalidStepError,
    ReportNotReadyError,
    UnknownFieldError,
)
from incident_report_service.core.export_mapper import export_filename
from incident_report_service.core.incident_session import IncidentSession
from incident_report_service.core.session_factory import get_incident_session
from incident_report_service.core.wizard import STEP_TITLES, Transition
from incident_report_service.infrastructure.document import PdfDocumentWriter
from incident_report_service.infrastructure.storage import StorageError
from incident_report_service.models import (
    CustomItemRequest,
    CustomItemResponse,
    DocumentBlockResponse,
    DocumentBlocksResponse,
    FieldValueRequest,
    HealthResponse,
    ListItemRequest,
    OptionsResponse,
    SessionStateResponse,
    TransitionResponse,
)
from incident_report_service.models.incident import (
    JURISDICTIONS,
    PREDEFINED_CHILDREN,
    PREDEFINED_PARTIES,
)

router = APIRouter(prefix="/api/v1/incident", tags=["incident"])
logger = logging.getLogger(__name__)


# Dependency for the PDF writer
def get_document_writer() -> PdfDocumentWriter:
    """Dependency for getting a PdfDocumentWriter configured from settings"""
    return PdfDocumentWriter(
        page_width_mm=settings.pdf_page_width_mm,
        page_height_mm=settings.pdf_page_height_mm,
        margin_mm=settings.pdf_margin_mm,
        top_mm=settings.pdf_top_mm,
        page_break_threshold_mm=settings.pdf_page_break_threshold_mm,
    )


def content_disposition(disposition: str, filename: str) -> str:
    """Content-Disposition value that survives any filename.

    Headers are latin-1, so the real name goes in the RFC 5987 `filename*`
    parameter and `filename` carries a plain-ASCII stand-in.
    """
    fallback = "".join(c for c in filename if c.isascii() and c.isprintable() and c not in "\"\\")
    fallback = fallback.strip() or "download"
    return f"{disposition}; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def session_state(session: IncidentSession) -> SessionStateResponse:
    """Snapshot the session for a response"""
    return SessionStateResponse(
        step=session.step,
        step_title=session.wizard.title,
        can_proceed=session.can_proceed(),
        date_validation_message=session.date_validation_message(),
        incident=session.data,
        report=session.report,
        generation_status=session.generation_status.value,
        is_generating=session.is_generating,
        custom_inputs=dict(session.custom_inputs),
    )


def _transition_response(transition: Transition, session: IncidentSession) -> TransitionResponse:
    return TransitionResponse(moved=transition.moved, state=session_state(session))


@router.get(
    "",
    response_model=SessionStateResponse,
    summary="Get Session State",
    description="""
Returns the current wizard step, incident data, report (if any) and the
derived progression flags.

`can_proceed` and `date_validation_message` are recomputed on every request
from the current data.
    """,
)
async def get_state(
    session: IncidentSession = Depends(get_incident_session)
) -> SessionStateResponse:
    """Get current session state"""
    return session_state(session)


@router.get(
    "/options",
    response_model=OptionsResponse,
    summary="Get Wizard Options",
)
async def get_options() -> OptionsResponse:
    """Predefined parties, children, jurisdictions and step titles"""
    return OptionsResponse(
        parties=list(PREDEFINED_PARTIES),
        children=list(PREDEFINED_CHILDREN),
        jurisdictions=list(JURISDICTIONS),
        steps=STEP_TITLES,
    )


@router.put(
    "/fields/{field}",
    response_model=SessionStateResponse,
    summary="Set Incident Field",
    responses={400: {"description": "Unknown field"}},
)
async def set_field(
    field: str,
    request: FieldValueRequest,
    session: IncidentSession = Depends(get_incident_session)
) -> SessionStateResponse:
    """Set date, time, narrative or jurisdiction"""
    try:
        session.set_field(field, request.value)
    except UnknownFieldError as e:
        logger.warning(f"Rejected field update: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    return session_state(session)


@router.post(
    "/{field}/toggle",
    response_model=SessionStateResponse,
    summary="Toggle Party or Child",
    responses={400: {"description": "Unknown field"}},
)
async def toggle_item(
    field: str,
    request: ListItemRequest,
    session: IncidentSession = Depends(get_incident_session)
) -> SessionStateResponse:
    """Add the item if absent, remove it if present"""
    try:
        session.toggle_item(field, request.item)
    except UnknownFieldError as e:
        logger.warning(f"Rejected toggle: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    return session_state(session)


@router.put(
    "/{field}/custom-input",
    response_model=SessionStateResponse,
    summary="Set Custom Entry Buffer",
    responses={400: {"description": "Unknown field"}},
)
async def set_custom_input(
    field: str,
    request: FieldValueRequest,
    session: IncidentSession = Depends(get_incident_session)
) -> SessionStateResponse:
    """Store the in-progress free-text party/child"""
    try:
        session.set_custom_input(field, request.value)
    except UnknownFieldError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return session_state(session)


@router.post(
    "/{field}/custom",
    response_model=CustomItemResponse,
    summary="Add Custom Party or Child",
    description="""
Append a free-text entry to `parties` or `children`.

**Workflow**:
1. Uses `value` from the body, or the buffered custom input when omitted
2. Trims whitespace
3. Ignores blank values and exact duplicates (`added: false`)
4. Clears the buffer once the entry is appended
    """,
    responses={400: {"description": "Unknown field"}},
)
async def add_custom_item(
    field: str,
    request: CustomItemRequest,
    session: IncidentSession = Depends(get_incident_session)
) -> CustomItemResponse:
    """Add a custom party or child"""
    try:
        added = session.add_custom_item(field, request.value)
    except UnknownFieldError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CustomItemResponse(added=added, state=session_state(session))


@router.post(
    "/evidence",
    response_model=SessionStateResponse,
    status_code=201,
    summary="Upload Evidence Files",
    description="""
Attach one or more files (photos, screenshots, PDF or Word documents) to the
incident.

**Workflow**:
1. Client sends multipart/form-data with one or more `files`
2. Each file is stored for the lifetime of the session
3. Evidence records are appended after existing ones in upload order

File type and size are restricted by the client's file chooser only.
    """,
    responses={
        201: {"description": "Evidence attached"},
        500: {"description": "Storage error"}
    }
)
async def upload_evidence(
    files: List[UploadFile] = File(..., description="Evidence files to attach"),
    session: IncidentSession = Depends(get_incident_session)
) -> SessionStateResponse:
    """Upload evidence files"""
    uploads = [(f.filename or "unnamed", await f.read(), f.content_type) for f in files]
    try:
        records = await session.add_evidence(uploads)
    except StorageError as e:
        logger.error(f"Evidence upload failed: {e}")
        raise HTTPException(status_code=500, detail=f"Upload failed: {str(e)}")

    logger.info(f"Attached {len(records)} evidence file(s)")
    return session_state(session)


@router.get(
    "/evidence/{index}/content",
    summary="Download Evidence File",
    responses={404: {"description": "Evidence not found"}},
)
async def download_evidence(
    index: int,
    session: IncidentSession = Depends(get_incident_session)
) -> StreamingResponse:
    """Stream an attached evidence file"""
    evidence = session.data.evidence
    if index < 0 or index >= len(evidence):
        raise HTTPException(status_code=404, detail="Evidence not found")

    record = evidence[index]
    if not await session.storage.is_live(record.handle):
        raise HTTPException(status_code=404, detail="Evidence not found")

    return StreamingResponse(
        session.storage.open_stream(record.handle),
        media_type=record.mime_type,
        headers={"Content-Disposition": content_disposition("inline", record.name)}
    )


@router.delete(
    "/evidence/{index}",
    response_model=SessionStateResponse,
    summary="Remove Evidence File",
    responses={404: {"description": "Evidence not found"}},
)
async def remove_evidence(
    index: int,
    session: IncidentSession = Depends(get_incident_session)
) -> SessionStateResponse:
    """Remove one evidence entry and release its content"""
    try:
        removed = await session.remove_evidence(index)
    except IndexError:
        raise HTTPException(status_code=404, detail="Evidence not found")

    logger.info(f"Removed evidence: {removed.name}")
    return session_state(session)


@router.post(
    "/advance",
    response_model=TransitionResponse,
    summary="Next Step",
    description="""
Move to the next wizard step when the current one is complete.

**Workflow**:
1. Re-evaluates the current step's completion rule
2. Stays put (`moved: false`) when the step is incomplete
3. Entering step 5 without a report generates one before responding;
   a failed generation is replaced by the fallback report
    """,
)
async def advance(
    session: IncidentSession = Depends(get_incident_session)
) -> TransitionResponse:
    """Advance the wizard"""
    transition = await session.advance()
    return _transition_response(transition, session)


@router.post(
    "/retreat",
    response_model=TransitionResponse,
    summary="Previous Step",
)
async def retreat(
    session: IncidentSession = Depends(get_incident_session)
) -> TransitionResponse:
    """Go back one step; keeps any generated report"""
    transition = session.retreat()
    return _transition_response(transition, session)


@router.post(
    "/restart",
    response_model=TransitionResponse,
    summary="Start Over",
)
async def restart(
    session: IncidentSession = Depends(get_incident_session)
) -> TransitionResponse:
    """Release evidence, clear incident and report, return to step 1"""
    transition = await session.restart()
    logger.info("Session restarted")
    return _transition_response(transition, session)


@router.post(
    "/regenerate",
    response_model=TransitionResponse,
    summary="Regenerate Report",
    description="""
Generate a new report for the current data, replacing the existing one.

Only available in step 5. Rejected with 409 while another generation is
running; the service never runs two generations at once.
    """,
    responses={409: {"description": "Not in review step, or generation already in flight"}},
)
async def regenerate(
    session: IncidentSession = Depends(get_incident_session)
) -> TransitionResponse:
    """Regenerate the report"""
    try:
        transition = await session.regenerate()
    except (InvalidStepError, GenerationInProgressError) as e:
        logger.warning(f"Regeneration rejected: {e}")
        raise HTTPException(status_code=409, detail=str(e))
    return _transition_response(transition, session)


@router.get(
    "/export/blocks",
    response_model=DocumentBlocksResponse,
    summary="Get Export Blocks",
    responses={409: {"description": "No report available"}},
)
async def export_blocks(
    session: IncidentSession = Depends(get_incident_session)
) -> DocumentBlocksResponse:
    """Ordered text blocks the exported document is built from"""
    try:
        blocks = session.export_blocks()
    except (ReportNotReadyError, GenerationInProgressError) as e:
        raise HTTPException(status_code=409, detail=str(e))

    return DocumentBlocksResponse(
        filename=export_filename(session.data),
        blocks=[
            DocumentBlockResponse(
                text=b.text,
                emphasis=b.emphasis.value,
                is_heading=b.is_heading,
                role=b.role.value,
            )
            for b in blocks
        ],
    )


@router.get(
    "/export",
    summary="Export Report as PDF",
    description="""
Download the report as `Incident-Report-<date>.pdf`.

**Workflow**:
1. Maps incident and report data to ordered document blocks
2. Paginates the blocks into a PDF
3. Returns the file as an attachment

A failure while building the document returns 500 "Export failed" and leaves
the session untouched, so the export can simply be retried.
    """,
    responses={
        200: {"description": "PDF document", "content": {"application/pdf": {}}},
        409: {"description": "No report available, or generation in flight"},
        500: {"description": "Export failed"}
    }
)
async def export_pdf(
    session: IncidentSession = Depends(get_incident_session),
    writer: PdfDocumentWriter = Depends(get_document_writer)
) -> Response:
    """Export the report"""
    try:
        blocks = session.export_blocks()
    except (ReportNotReadyError, GenerationInProgressError) as e:
        raise HTTPException(status_code=409, detail=str(e))

    try:
        content = await run_in_threadpool(writer.render, blocks, title=session.report.title)
    except ExportError as e:
        logger.error(f"Export failed: {e}")
        raise HTTPException(status_code=500, detail="Export failed")

    filename = export_filename(session.data)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition("attachment", filename)}
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Detailed Health Check",
)
async def health_check(
    session: IncidentSession = Depends(get_incident_session)
) -> HealthResponse:
    """Health check including evidence storage"""
    storage_ok = await session.storage.health_check()
    return HealthResponse(
        status="healthy" if storage_ok else "degraded",
        service=settings.service_name,
        storage_available=storage_ok,
    )
