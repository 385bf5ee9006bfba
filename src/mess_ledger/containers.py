"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from mess_ledger.adapters.supabase_member_repository import SupabaseMemberRepository
from mess_ledger.adapters.supabase_record_repository import SupabaseRecordRepository
from mess_ledger.config import Settings, parse_timezone
from mess_ledger.services.cache import InMemoryCache
from mess_ledger.services.membership import MembershipService
from mess_ledger.services.periods import PeriodResolver
from mess_ledger.services.reports import ReportOptions, ReportService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    membership_service: MembershipService
    report_service: ReportService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    membership_service = MembershipService(SupabaseMemberRepository(supabase_client))
    report_service = ReportService(
        membership=membership_service,
        records=SupabaseRecordRepository(supabase_client),
        resolver=PeriodResolver(parse_timezone(resolved_settings.report_timezone)),
        cache=InMemoryCache(),
        options=ReportOptions(
            count_guest_meals=resolved_settings.count_guest_meals,
            approved_expenses_only=resolved_settings.approved_expenses_only,
        ),
        cache_ttl_seconds=resolved_settings.report_cache_ttl_seconds,
    )

    async def close_resources() -> None:
        report_service.clear_cache()

    return AppContainer(
        settings=resolved_settings,
        membership_service=membership_service,
        report_service=report_service,
        close_resources=close_resources,
    )
