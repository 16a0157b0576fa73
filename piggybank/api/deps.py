from functools import lru_cache

from piggybank.config import get_settings
from piggybank.core.dispatcher import WebhookDispatcher
from piggybank.services.whatsapp_client import WhatsAppClient
from piggybank.storage.base import TransactionStore
from piggybank.storage.factory import build_store


@lru_cache(maxsize=1)
def get_store() -> TransactionStore:
    return build_store(get_settings())


@lru_cache(maxsize=1)
def get_sender() -> WhatsAppClient:
    settings = get_settings()
    return WhatsAppClient(
        access_token=settings.ACCESS_TOKEN,
        phone_id=settings.PHONE_ID,
        base_url=settings.GRAPH_API_URL,
    )


@lru_cache(maxsize=1)
def get_dispatcher() -> WebhookDispatcher:
    return WebhookDispatcher(
        store=get_store(),
        sender=get_sender(),
        reply_on_invalid_amount=get_settings().REPLY_ON_INVALID_AMOUNT,
    )
