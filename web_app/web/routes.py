"""Browser-facing routes: landing page and short code redirects."""

import html

from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from shortener.lifecycle import Outcome
from shortener.shortcode import ShortCodeGenerator

router = APIRouter()

PAGE_TEMPLATE = (
    "<!doctype html><html lang=en><head><meta charset=utf-8>"
    "<title>{title}</title></head><body><h1>{title}</h1><p>{message}</p>"
    "<p><a href=\"/\">Back to the homepage</a></p></body></html>"
)


def _page(title: str, message: str, status_code: int) -> HTMLResponse:
    content = PAGE_TEMPLATE.format(title=html.escape(title), message=html.escape(message))
    return HTMLResponse(content=content, status_code=status_code)


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def homepage(request: Request):
    """Serve a minimal homepage pointing at the API."""
    return _page(
        "URL Shortener",
        "POST a URL to /api/shorten to get a short link. API docs live at /api/docs.",
        status.HTTP_200_OK,
    )


@router.get("/{code}", include_in_schema=False)
async def redirect_to_url(request: Request, code: str):
    """Redirect to the original URL.

    301 for active links, 410 for the visitor who discovers an expiry,
    404 for everything else.
    """
    if not ShortCodeGenerator.is_valid_format(code):
        return _page("Not found", "This short link does not exist.", status.HTTP_404_NOT_FOUND)

    resolution = await request.app.state.resolution.resolve(code)

    if resolution.outcome is Outcome.REDIRECT:
        return RedirectResponse(url=resolution.target, status_code=status.HTTP_301_MOVED_PERMANENTLY)

    if resolution.outcome is Outcome.GONE:
        return _page("Link expired", "This short link has expired.", status.HTTP_410_GONE)

    return _page("Not found", "This short link does not exist.", status.HTTP_404_NOT_FOUND)
