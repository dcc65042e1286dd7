from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_hybrid_extractor
from models.cv_document import CVDocument
from models.requests import CVRequest, EntitiesRequest, ExtractRequest
from models.responses import EntitiesResponse, ExtractionResponse, HealthResponse
from services.cv_mapper import create_cv_structure
from services.errors import ConfigurationError, CVMappingError, ExtractionError, InputError
from services.ner.engine import resolve_language
from services.pipeline.hybrid import HybridCVExtractor

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.get("/health", response_model=HealthResponse)
async def health(extractor: HybridCVExtractor = Depends(get_hybrid_extractor)):
    readiness = extractor.check_readiness()
    return HealthResponse(
        status="ok" if readiness["ready"] else "degraded",
        ai_available=readiness["ai_available"],
        ner_available=readiness["ner_available"],
        recommended_method=readiness["recommended_method"],
        stats=extractor.get_stats(),
    )


@router.post("/extract", response_model=ExtractionResponse)
@limiter.limit("10/minute")
async def extract(
    request: Request,
    body: ExtractRequest,
    extractor: HybridCVExtractor = Depends(get_hybrid_extractor),
):
    try:
        cv = await extractor.extract_cv(body.text, body.language)
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConfigurationError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ExtractionError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return ExtractionResponse(cv=cv, method=cv.metadata.extraction_method)


@router.post("/entities", response_model=EntitiesResponse)
@limiter.limit("30/minute")
async def entities(
    request: Request,
    body: EntitiesRequest,
    extractor: HybridCVExtractor = Depends(get_hybrid_extractor),
):
    try:
        found = extractor.ner.extract_entities(body.text, body.language)
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return EntitiesResponse(
        entities=found,
        language=resolve_language(body.text, body.language),
        count=len(found),
    )


@router.post("/cv", response_model=CVDocument)
@limiter.limit("30/minute")
async def regenerate_cv(request: Request, body: CVRequest):
    try:
        return create_cv_structure(body.entities, body.raw_text)
    except CVMappingError as e:
        raise HTTPException(status_code=422, detail=str(e))
