"""Summarization and provider endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from src.core.datetime_utils import to_utc_iso
from src.core.exceptions import (
    DeadlineExceededError,
    InvalidConfigurationError,
    MalformedResponseError,
    SummarizerError,
    TransportError,
    UnknownProviderError,
)
from src.summarization.factory import ProviderFactory
from src.summarization.manager import SummarizationManager
from src.summarization.models import SummarizableItem

router = APIRouter()


def get_summarization_manager(request: Request) -> SummarizationManager:
    """Dependency to get summarization manager."""
    return request.app.state.summarization_manager


class ItemRequest(BaseModel):
    title: str
    content: str
    published_at: datetime

    def to_item(self) -> SummarizableItem:
        return SummarizableItem(
            title=self.title,
            content=self.content,
            published_at=self.published_at,
        )


class BatchRequest(BaseModel):
    items: list[ItemRequest] = Field(default_factory=list)
    request_delay: float | None = Field(default=None, ge=0)


class SummaryResponse(BaseModel):
    summary: str
    provider: str
    model: str


class BatchItemResponse(BaseModel):
    title: str
    published_at: str | None
    summary: str | None
    error: str | None


class BatchResponse(BaseModel):
    provider: str
    total: int
    succeeded: int
    results: list[BatchItemResponse]


def _to_http_error(error: SummarizerError) -> HTTPException:
    if isinstance(error, InvalidConfigurationError):
        return HTTPException(status_code=503, detail=str(error))
    if isinstance(error, DeadlineExceededError):
        return HTTPException(status_code=504, detail=str(error))
    if isinstance(error, (MalformedResponseError, TransportError)):
        return HTTPException(status_code=502, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


@router.get("/providers")
async def list_providers(
    manager: SummarizationManager = Depends(get_summarization_manager),
):
    """List supported providers and the active one."""
    return {
        "providers": manager.list_supported_providers(),
        "active": manager.provider.value,
        "model": manager.model,
    }


@router.get("/providers/{name}")
async def get_provider(name: str):
    """Get support status and defaults for a provider."""
    try:
        provider = ProviderFactory.resolve(name)
    except UnknownProviderError as e:
        raise HTTPException(status_code=404, detail=str(e))

    defaults = ProviderFactory.defaults(provider)
    return {
        "name": provider.value,
        "supported": True,
        "default_endpoint": defaults.endpoint,
        "default_model": defaults.model,
    }


@router.post("/summaries", response_model=SummaryResponse)
async def create_summary(
    request: ItemRequest,
    manager: SummarizationManager = Depends(get_summarization_manager),
):
    """Summarize a single item."""
    try:
        summary = await manager.summarize(request.to_item())
    except SummarizerError as e:
        raise _to_http_error(e)

    return SummaryResponse(
        summary=summary,
        provider=manager.provider.value,
        model=manager.model,
    )


@router.post("/summaries/batch", response_model=BatchResponse)
async def create_summaries(
    request: BatchRequest,
    manager: SummarizationManager = Depends(get_summarization_manager),
):
    """Summarize items in order; per-item failures are reported inline."""
    try:
        results = await manager.summarize_many(
            [item.to_item() for item in request.items],
            request_delay=request.request_delay,
        )
    except SummarizerError as e:
        raise _to_http_error(e)

    return BatchResponse(
        provider=manager.provider.value,
        total=len(results),
        succeeded=sum(1 for r in results if r.ok),
        results=[
            BatchItemResponse(
                title=r.title,
                published_at=to_utc_iso(r.published_at),
                summary=r.summary,
                error=r.error,
            )
            for r in results
        ],
    )
