"""
Colaboradores de notificación (reporte de cada corrida).
"""
from typing import List, Optional, Protocol, Sequence

from loguru import logger

from inventory_sync.infrastructure.external.notifications.email_notifier import EmailNotifier
from inventory_sync.infrastructure.external.notifications.telegram_notifier import TelegramNotifier
from inventory_sync.shared.exceptions.sync import NotificationError


class Notifier(Protocol):
    def send(self, subject: str, body: str) -> None: ...


class NotifierGroup:
    """
    Envía el mismo reporte por varios canales.
    Intenta todos los canales y levanta NotificationError si alguno falló.
    """

    channel = "group"

    def __init__(self, notifiers: Sequence[Notifier]):
        self.notifiers = list(notifiers)

    def send(self, subject: str, body: str) -> None:
        failures: List[str] = []
        for notifier in self.notifiers:
            try:
                notifier.send(subject, body)
            except NotificationError as e:
                logger.error(e.message)
                failures.append(e.channel)
        if failures:
            raise NotificationError(", ".join(failures), f"{len(failures)} canal(es) fallaron")


def build_notifier(settings) -> Optional[Notifier]:
    """
    Construye los canales configurados en Settings (None si no hay ninguno).
    """
    notifiers: List[Notifier] = []
    if settings.ADMIN_EMAIL:
        notifiers.append(
            EmailNotifier(
                sender=settings.effective_email_from,
                recipient=settings.ADMIN_EMAIL,
                host=settings.SMTP_HOST,
                port=settings.SMTP_PORT,
                username=settings.SMTP_USER or None,
                password=settings.SMTP_PASSWORD or None,
                use_tls=settings.SMTP_USE_TLS,
            )
        )
    if settings.TELEGRAM_BOT_TOKEN and settings.TELEGRAM_CHAT_ID:
        notifiers.append(TelegramNotifier(settings.TELEGRAM_BOT_TOKEN, settings.TELEGRAM_CHAT_ID))

    if not notifiers:
        return None
    if len(notifiers) == 1:
        return notifiers[0]
    return NotifierGroup(notifiers)


__all__ = ["EmailNotifier", "TelegramNotifier", "Notifier", "NotifierGroup", "build_notifier"]
