"""
FastAPI backend for extracting events from images and web pages.

The upload form posts multipart data to /api/process with either an
``image`` file or a ``url`` field and gets back an event record with
normalized dates.
"""
from datetime import datetime
from typing import List, Dict, Any, Optional
from fastapi import FastAPI, File, Form, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config import FRONTEND_URL, API_HOST, API_PORT
from event_service import get_event_service
from shared_utils import ExtractionError, logger

app = FastAPI(
    title="Event Extractor API",
    description="Extract structured event information from images and web pages",
    version="1.0.0"
)

# Enable CORS for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        FRONTEND_URL,
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class EventLocation(BaseModel):
    """Where the event takes place."""
    name: str
    address: Optional[str] = None


class DatePair(BaseModel):
    """A date phrase as written and its normalized value."""
    original: str
    parsed: Optional[str] = None


class EventRecordResponse(BaseModel):
    """Event record returned by /api/process."""
    title: str
    datetime: Optional[str] = None
    location: EventLocation
    description: Optional[str] = None
    type: Optional[str] = None
    allDates: List[DatePair] = []
    source: Optional[str] = None
    url: Optional[str] = None


def error_response(message: str, status_code: int) -> JSONResponse:
    """Errors use a flat {"error": ...} body, which the upload form reads."""
    return JSONResponse(status_code=status_code, content={"error": message})


@app.post("/api/process", response_model=EventRecordResponse)
async def process(image: Optional[UploadFile] = File(None), url: Optional[str] = Form(None)):
    """
    Extract an event from an uploaded image or a page URL.

    The image takes precedence when both are supplied.
    """
    logger.log("info", "Process request received",
               file=image.filename if image else None, url=url)

    if image is not None and image.filename:
        content_type = image.content_type or ''
        if not content_type.startswith('image/'):
            return error_response("Please upload an image file", 400)
    elif not url or not url.strip():
        return error_response("No image or URL provided", 400)

    service = get_event_service()

    try:
        if image is not None and image.filename:
            image_bytes = await image.read()
            record: Dict[str, Any] = service.process_image(image_bytes, image.content_type)
        else:
            record = service.process_url(url)
        return record

    except ExtractionError as e:
        logger.log("error", "Extraction failed", error=str(e))
        return error_response("Failed to process request", 500)
    except Exception as e:
        logger.log("error", "Processing error", error=str(e))
        return error_response("Failed to process request", 500)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "message": "Event Extractor API is running",
        "version": "1.0.0",
        "features": ["image-ocr", "url-extraction", "date-normalization"]
    }


@app.get("/health")
async def health_check():
    """Report which external services are configured."""
    service = get_event_service()
    clients = service.extractor.clients

    return {
        "status": "healthy",
        "openai": "configured" if clients.openai else "missing",
        "firecrawl": "configured" if clients.firecrawl else "missing",
        "timestamp": datetime.now().isoformat()
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=API_HOST, port=API_PORT)
