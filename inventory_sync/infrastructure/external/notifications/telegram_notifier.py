"""
Cliente para enviar reportes de sincronización vía Telegram Bot API.
"""
import html

import httpx
from loguru import logger

from inventory_sync.shared.exceptions.sync import NotificationError

# Límite de Telegram para el texto de un mensaje
MAX_MESSAGE_LENGTH = 4096


class TelegramNotifier:
    """
    Cliente simple para enviar mensajes vía Telegram Bot API.
    """

    channel = "telegram"

    def __init__(self, bot_token: str, chat_id: str, *, timeout_s: float = 10.0, transport=None):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.timeout_s = timeout_s
        self.base_url = f"https://api.telegram.org/bot{self.bot_token}"
        self._transport = transport

    def build_text(self, subject: str, body: str) -> str:
        """Título en negrita + reporte en bloque <pre>, escapado para parse_mode HTML."""
        header = f"<b>{html.escape(subject)}</b>\n"
        budget = MAX_MESSAGE_LENGTH - len(header) - len("<pre></pre>")
        escaped = html.escape(body)
        if len(escaped) > budget:
            escaped = escaped[: budget - 3] + "..."
        return f"{header}<pre>{escaped}</pre>"

    def send(self, subject: str, body: str) -> None:
        """
        Envía el reporte al chat configurado.

        Raises:
            NotificationError: si la API de Telegram falla o no responde
        """
        payload = {
            "chat_id": self.chat_id,
            "text": self.build_text(subject, body),
            "parse_mode": "HTML",
        }
        try:
            with httpx.Client(timeout=self.timeout_s, transport=self._transport) as client:
                response = client.post(f"{self.base_url}/sendMessage", json=payload)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise NotificationError(self.channel, str(e)) from e
        logger.info(f"Mensaje de Telegram enviado al chat {self.chat_id}")
