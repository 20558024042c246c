"""
Envío de reportes de sincronización por email (SMTP).
"""
import smtplib
from email.message import EmailMessage
from typing import Callable, Optional

from loguru import logger

from inventory_sync.shared.exceptions.sync import NotificationError


class EmailNotifier:
    """
    Envía el reporte en texto plano al administrador de la tienda.
    """

    channel = "email"

    def __init__(
        self,
        *,
        sender: str,
        recipient: str,
        host: str = "localhost",
        port: int = 25,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = False,
        timeout_s: float = 30.0,
        smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
    ) -> None:
        self.sender = sender
        self.recipient = recipient
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout_s = timeout_s
        self._smtp_factory = smtp_factory

    def build_message(self, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = self.recipient
        message["Subject"] = subject
        message.set_content(body)
        return message

    def send(self, subject: str, body: str) -> None:
        """
        Envía el reporte.

        Raises:
            NotificationError: si el servidor SMTP rechaza o no responde
        """
        message = self.build_message(subject, body)
        try:
            with self._smtp_factory(self.host, self.port, timeout=self.timeout_s) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(self.channel, str(e)) from e
        logger.info(f"Email enviado a {self.recipient}: {subject}")
