"""Report API endpoints with simple token auth."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from mess_ledger.services.exceptions import InvalidPeriodError, MemberNotFoundError
from mess_ledger.services.reports import serialize_report

if TYPE_CHECKING:
    from mess_ledger.containers import AppContainer

router = APIRouter(prefix="/reports", tags=["reports"])

_logger = logging.getLogger(__name__)


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.delete("/cache", dependencies=[Depends(require_admin)])
async def clear_report_cache(
    request: Request, member_id: UUID | None = None
) -> dict[str, int]:
    """Drop cached reports so the next request recomputes them."""
    container: AppContainer = request.app.state.container
    return {"cleared": container.report_service.clear_cache(member_id)}


@router.get("/{member_id}", dependencies=[Depends(require_admin)])
async def member_report(  # noqa: PLR0913
    member_id: UUID,
    request: Request,
    start: str | None = None,
    end: str | None = None,
    month: int | None = None,
    year: int | None = None,
    current: bool | None = None,
) -> dict[str, object]:
    """Return the settlement report as seen by a member.

    Without any period parameters the report covers the current month so
    far.
    """
    container: AppContainer = request.app.state.container
    if current is None:
        current = start is None and end is None and month is None and year is None
    try:
        report = await container.report_service.generate(
            member_id,
            start=start,
            end=end,
            month=month,
            year=year,
            default_to_current_month=current,
        )
    except InvalidPeriodError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    except MemberNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except Exception:
        _logger.exception("Failed to build report", extra={"member_id": member_id})
        raise
    return serialize_report(report)
