import logging

from fastapi import APIRouter

from src.dependencies import AIClientDep, ResolverDep
from src.schemas.api.settings import AISettingsResponse, AISettingsUpdate, KeyValidationRequest, KeyValidationResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/ai", response_model=AISettingsResponse)
def get_ai_settings(resolver: ResolverDep):
    """Selected provider plus, per provider, whether a key is stored (masked)."""
    return AISettingsResponse(selected=resolver.selected_provider(), providers=resolver.describe())


@router.put("/ai", response_model=AISettingsResponse)
def update_ai_settings(update: AISettingsUpdate, resolver: ResolverDep):
    if update.api_key is not None:
        resolver.set_api_key(update.provider, update.api_key)
    if update.model is not None:
        resolver.set_model(update.provider, update.model.strip() or None)
    if update.select:
        resolver.select_provider(update.provider)

    logger.info(f"AI settings updated for {update.provider.value} (selected={update.select})")
    return AISettingsResponse(selected=resolver.selected_provider(), providers=resolver.describe())


@router.post("/ai/validate", response_model=KeyValidationResponse)
def validate_api_key(request: KeyValidationRequest, client: AIClientDep):
    """Check a key with one small request; the key is not stored."""
    valid = client.validate_api_key(request.provider, request.api_key, request.model)
    return KeyValidationResponse(provider=request.provider, valid=valid)
