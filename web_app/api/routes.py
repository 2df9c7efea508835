"""API routes implementation."""

from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Request, HTTPException, status

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    ValidationErrorResponse,
    LinkResponse,
    LinkListResponse,
    StatisticsResponse,
    LogEventRequest,
    LogEventResponse,
    HealthResponse,
    ErrorResponse,
)
from shortlinks.errors import LinkValidationError
from shortlinks.models import Link
from shortlinks.common.url_builder import short_url_for_config

router = APIRouter()


def short_url_for(request: Request, shortcode: str) -> str:
    return short_url_for_config(request.app.state.config, shortcode)


def link_response(request: Request, link: Link, now: datetime) -> LinkResponse:
    return LinkResponse(
        id=link.id,
        original_url=link.original_url,
        shortcode=link.shortcode,
        short_url=short_url_for(request, link.shortcode),
        created_at=link.created_at,
        expiry_date=link.expiry_at,
        expired=link.is_expired(now),
        clicks=link.clicks,
        click_details=[
            {"timestamp": click.timestamp, "source": click.source}
            for click in link.click_log
        ],
    )


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    responses={
        400: {"model": ValidationErrorResponse, "description": "Invalid request"},
        409: {"model": ValidationErrorResponse, "description": "Short code already taken"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create short URL",
    description="Create a shortened URL with a validity period. Optionally provide a custom short code.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    registry = request.app.state.registry

    try:
        link = await registry.create(
            original_url=body.original_url,
            validity_minutes=body.validity_period,
            custom_shortcode=body.custom_shortcode,
        )
    except LinkValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT if e.is_conflict else status.HTTP_400_BAD_REQUEST,
            detail={"errors": e.to_dict()},
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Internal error: {str(e)}",
        )

    return ShortenResponse(
        shortcode=link.shortcode,
        short_url=short_url_for(request, link.shortcode),
        expiry_date=link.expiry_at,
    )


@router.get(
    "/urls",
    response_model=LinkListResponse,
    summary="List links",
    description="List every link in creation order, including expired ones.",
)
async def list_urls(request: Request):
    """List all links with their click details."""
    registry = request.app.state.registry
    now = registry.clock()

    links: List[Link] = await registry.list_links()
    urls = [link_response(request, link, now) for link in links]

    return LinkListResponse(count=len(urls), urls=urls)


@router.get(
    "/urls/{shortcode}",
    response_model=LinkResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Get URL information",
    description="Get information about a shortened URL including its clicks. Does not count a click.",
)
async def get_url_info(request: Request, shortcode: str):
    """Get information about a shortened URL."""
    registry = request.app.state.registry

    link = await registry.get(shortcode)

    if not link:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short code '{shortcode}' not found",
        )

    return link_response(request, link, registry.clock())


@router.get(
    "/stats",
    response_model=StatisticsResponse,
    summary="Get statistics",
    description="Get total links, total clicks and currently active links.",
)
async def get_statistics(request: Request):
    """Get registry statistics."""
    registry = request.app.state.registry

    stats = await registry.summary()

    return StatisticsResponse(**stats)


@router.post(
    "/log",
    response_model=LogEventResponse,
    summary="Log an event",
    description="Accept an application event and write it to the service log.",
)
async def log_event(request: Request, body: LogEventRequest):
    """Event log sink."""
    event_sink = request.app.state.event_sink

    ack = await event_sink.log(body.event_type, body.data, body.timestamp)

    return LogEventResponse(**ack)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    registry = request.app.state.registry

    stats = await registry.summary()

    return HealthResponse(
        status="healthy",
        total_links=stats["total_links"],
        timestamp=datetime.now(timezone.utc),
    )
