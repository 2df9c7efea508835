"""Web interface routes implementation."""

import os
from typing import Optional

from fastapi import APIRouter, Request, Form, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from shortlinks.errors import LinkValidationError
from shortlinks.registry import ResolveStatus
from shortlinks.shortcode import ShortCodeGenerator
from shortlinks.common.headers import click_source_from_headers
from shortlinks.common.url_builder import short_url_for_config

router = APIRouter()

template_dir = os.path.join(os.path.dirname(__file__), "..", "templates")
templates = Jinja2Templates(directory=template_dir)

# How many links the homepage and statistics page show in short lists
RECENT_LINKS = 5
RECENT_CLICKS = 3


def _short_url(request: Request, shortcode: str) -> str:
    return short_url_for_config(request.app.state.config, shortcode)


async def _render_homepage(
    request: Request,
    form: Optional[dict] = None,
    errors: Optional[dict] = None,
    status_code: int = 200,
) -> HTMLResponse:
    registry = request.app.state.registry
    config = request.app.state.config
    now = registry.clock()

    links = await registry.list_links()
    recent = [
        {
            "link": link,
            "short_url": _short_url(request, link.shortcode),
            "expired": link.is_expired(now),
        }
        for link in reversed(links[-RECENT_LINKS:])
    ]

    context = {
        "form": form or {
            "originalUrl": "",
            "validityPeriod": config.default_validity_minutes,
            "customShortcode": "",
        },
        "errors": errors or {},
        "recent": recent,
    }
    return templates.TemplateResponse(request, "index.html", context, status_code=status_code)


def _message_page(request: Request, title: str, message: str, status_code: int) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "message.html",
        {"title": title, "message": message},
        status_code=status_code,
    )


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def homepage(request: Request):
    """Serve the shortener form with the most recent links."""
    return await _render_homepage(request)


@router.post("/create", response_class=HTMLResponse, include_in_schema=False)
async def create_short_url_web(
    request: Request,
    original_url: str = Form("", alias="originalUrl"),
    validity_period: str = Form("", alias="validityPeriod"),
    custom_shortcode: str = Form("", alias="customShortcode"),
):
    """Handle form submission to create a short link."""
    registry = request.app.state.registry
    config = request.app.state.config

    form = {
        "originalUrl": original_url,
        "validityPeriod": validity_period,
        "customShortcode": custom_shortcode,
    }

    # Blank validity falls back to the default, anything non-numeric is passed through to be rejected
    validity_text = validity_period.strip()
    if not validity_text:
        validity = config.default_validity_minutes
    else:
        try:
            validity = int(validity_text)
        except ValueError:
            validity = validity_text

    try:
        await registry.create(
            original_url=original_url.strip(),
            validity_minutes=validity,
            custom_shortcode=custom_shortcode,
        )
    except LinkValidationError as e:
        status_code = status.HTTP_409_CONFLICT if e.is_conflict else status.HTTP_400_BAD_REQUEST
        return await _render_homepage(request, form=form, errors=e.to_dict(), status_code=status_code)

    return RedirectResponse(url=str(request.url_for("homepage")), status_code=status.HTTP_303_SEE_OTHER)


@router.get("/statistics", response_class=HTMLResponse, include_in_schema=False)
async def statistics_page(request: Request):
    """Summary and per-link details."""
    registry = request.app.state.registry
    now = registry.clock()

    links = await registry.list_links()
    summary = await registry.summary()

    rows = [
        {
            "link": link,
            "short_url": _short_url(request, link.shortcode),
            "expired": link.is_expired(now),
            "recent_clicks": list(reversed(link.click_log[-RECENT_CLICKS:])),
        }
        for link in links
    ]

    return templates.TemplateResponse(
        request,
        "statistics.html",
        {"summary": summary, "rows": rows},
    )


@router.get("/{shortcode}", include_in_schema=False)
async def redirect_to_url(request: Request, shortcode: str):
    """Redirect to the original URL while the link is live."""
    registry = request.app.state.registry

    # Stray paths such as /favicon.ico can never name a link
    if not ShortCodeGenerator.is_valid_format(shortcode):
        return _message_page(
            request,
            "Link not found",
            f"Short code '{shortcode}' not found",
            status.HTTP_404_NOT_FOUND,
        )

    resolution = await registry.resolve(
        shortcode,
        click_source=click_source_from_headers(request.headers),
    )

    if resolution.status is ResolveStatus.NOT_FOUND:
        return _message_page(
            request,
            "Link not found",
            f"Short code '{shortcode}' not found",
            status.HTTP_404_NOT_FOUND,
        )

    if resolution.status is ResolveStatus.EXPIRED:
        return _message_page(
            request,
            "Link expired",
            "This shortened URL has expired",
            status.HTTP_410_GONE,
        )

    # Temporary redirect so every visit comes back and is counted
    return RedirectResponse(url=resolution.original_url, status_code=status.HTTP_302_FOUND)
