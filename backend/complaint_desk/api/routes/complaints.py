from functools import partial

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from loguru import logger

from complaint_desk.clients.complaints_api import ComplaintsApiClient
from complaint_desk.core.config import settings
from complaint_desk.core.deps import (
    CallerIdentity,
    get_complaints_client,
    get_identity,
    require_role,
)
from complaint_desk.core.rate_limit import limiter
from complaint_desk.core.system_config import SystemConfigProvider, get_system_config
from complaint_desk.schemas.filters import HIGH_CRITICAL, PAGE_SIZES, SLA_STATUSES, FilterState, Role
from complaint_desk.schemas.view import (
    ComplaintListView,
    FilterOption,
    FilterOptionsOut,
    VocabularyOut,
)
from complaint_desk.services.fetcher import SharedResultStore
from complaint_desk.services.list_controller import ComplaintsListController
from complaint_desk.services.url_sync import seed_filter_state
from complaint_desk.services.view_projection import project_view
from complaint_desk.utils.complaints import pretty_label

router = APIRouter(prefix="/complaints", tags=["complaints"])


def _options(values) -> list[FilterOption]:
    return [FilterOption(value=v, label=pretty_label(v)) for v in values]


@router.get("/view", response_model=ComplaintListView)
@limiter.limit(settings.COMPLAINTS_VIEW_RATE)
async def complaints_view(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    identity: CallerIdentity = Depends(get_identity),
    system_config: SystemConfigProvider = Depends(get_system_config),
    client: ComplaintsApiClient = Depends(get_complaints_client),
):
    """List view for the caller, seeded from the recognized URL filter keys."""

    if limit not in PAGE_SIZES:
        raise HTTPException(
            status_code=422,
            detail=f"limit must be one of {list(PAGE_SIZES)}",
        )

    seeded = seed_filter_state(request.query_params, base=FilterState(page_size=limit))
    store = SharedResultStore(identity.user_id)
    controller = ComplaintsListController(
        identity,
        partial(client.list_complaints, token=identity.access_token),
        vocabulary=system_config.vocabulary_source,
        store=store,
        initial=seeded.model_copy(update={"page": page}),
    )
    last_good = await store.last_good()
    if last_good is not None:
        controller.restore(*last_good)
    fetch = await controller.load()
    if fetch.error:
        logger.bind(role=identity.role, error=fetch.error).info("complaints_view_degraded")
    return controller.snapshot()


@router.get("/filters", response_model=FilterOptionsOut)
async def complaint_filters(
    identity: CallerIdentity = Depends(get_identity),
    system_config: SystemConfigProvider = Depends(get_system_config),
):
    vocabulary = system_config.vocabulary
    priorities = _options(vocabulary.priorities)
    if vocabulary.supports_high_critical:
        priorities.append(FilterOption(value=HIGH_CRITICAL, label="High & Critical"))
    return FilterOptionsOut(
        statuses=_options(vocabulary.statuses),
        priorities=priorities,
        sla_statuses=_options(SLA_STATUSES),
        advanced_filters=list(project_view(identity.role).ordered_filters),
    )


@router.post("/vocabulary/refresh", response_model=VocabularyOut)
async def refresh_vocabulary(
    identity: CallerIdentity = Depends(require_role(Role.ADMINISTRATOR)),
    system_config: SystemConfigProvider = Depends(get_system_config),
):
    vocabulary = await system_config.refresh()
    logger.bind(
        statuses=list(vocabulary.statuses), priorities=list(vocabulary.priorities)
    ).info("vocabulary_refreshed")
    return VocabularyOut(
        statuses=list(vocabulary.statuses),
        priorities=list(vocabulary.priorities),
        initialized=system_config.is_initialized,
    )
