import logging

from fastapi import APIRouter, Depends, HTTPException, status

from siteguard.core.errors import AnalysisError, InvalidURLError
from siteguard.core.security import require_api_key
from siteguard.models.schemas import AnalyzeRequest, AnalyzeResult
from siteguard.services.analyzer import analyzer

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/analyze", response_model=AnalyzeResult, dependencies=[Depends(require_api_key)])
async def analyze_url(request: AnalyzeRequest):
    """
    Website trust analysis.

    Pipeline: CT certificate lookup + domain age → protocol, reputation and
    URL-structure heuristics → clamped 0-100 risk score → verdict.
    """
    try:
        report = await analyzer.analyze(request.url)
    except InvalidURLError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except AnalysisError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Analysis failed. Please try again.",
        )

    return AnalyzeResult(**report.to_dict())
