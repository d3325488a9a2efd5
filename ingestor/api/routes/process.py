from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from ingestor.core.errors import ErrorKind, IngestError
from ingestor.services.ingest_service import IngestService

router = APIRouter(tags=["ingest"])


def get_ingest_service(request: Request) -> IngestService:
    return request.app.state.ingest_service


@router.post("/process")
async def process_payload(request: Request, service: IngestService = Depends(get_ingest_service)):
    """Validate the JSON body and store it as a file under DATA_LOCATION."""
    try:
        payload = await request.json()
    except ValueError:
        # unparseable body is judged by the validator like any other bad payload
        payload = None

    result = await service.process(payload)
    if not result.ok:
        raise IngestError(result.error or ErrorKind.INTERNAL)

    return PlainTextResponse("Success")
