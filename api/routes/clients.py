"""Client profile routes"""

from fastapi import APIRouter, Depends
import logging

from adapters import PlatformClient
from api.dependencies import get_platform_client
from domain.schemas import ClientProfile

router = APIRouter(prefix="/clients", tags=["Clients"])
logger = logging.getLogger("dietaudit.api.clients")


@router.get("/{user_id}", response_model=ClientProfile)
def get_client_profile(
    user_id: str, platform: PlatformClient = Depends(get_platform_client)
) -> ClientProfile:
    """Fetch a client's profile and restrictions from the nutrition platform."""
    return platform.fetch_client_profile(user_id)
