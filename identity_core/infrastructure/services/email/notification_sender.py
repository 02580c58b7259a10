"""Email notification sender.

Implements ``INotificationSender`` with Jinja2 templates and fastapi-mail.
Each message is rendered twice, as HTML (auto-escaped) and as plain text,
and delivered as a multipart/alternative email.

In test mode (``EMAIL_TEST_MODE``, on by default in development and test)
messages are logged instead of sent.

Transport failures are expected conditions and become
``Failure(DELIVERY_ERROR)``. A missing or broken template is a deployment
fault and raises ``TemplateRenderError``.
"""

import asyncio
from pathlib import Path
from typing import Any, Optional

import structlog
from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType, MultipartSubtypeEnum
from fastapi_mail.errors import ConnectionErrors
from jinja2 import Environment, FileSystemLoader, TemplateError, TemplateNotFound, select_autoescape

from identity_core.core.config.settings import settings
from identity_core.core.exceptions import ConfigurationError, TemplateRenderError
from identity_core.domain.errors import ErrorKind
from identity_core.domain.interfaces.notification import INotificationSender
from identity_core.domain.outcome import Failure, Outcome, Success
from identity_core.domain.value_objects.email import mask_email

logger = structlog.get_logger(__name__)

PACKAGE_TEMPLATES_DIR = Path(__file__).resolve().parents[3] / "templates" / "email"
CONFIRMATION_TEMPLATE = "email_confirmation"


class EmailNotificationSender(INotificationSender):
    """Production email sender.

    Attributes:
        jinja_env: Jinja2 environment for template rendering
        fastmail: FastMail client, or None in test mode
    """

    def __init__(
        self,
        templates_dir: Optional[Path] = None,
        test_mode: Optional[bool] = None,
        fastmail: Optional[FastMail] = None,
    ):
        """Set up template rendering and the SMTP client.

        Raises:
            ConfigurationError: If the SMTP settings are missing or insecure
        """
        self.test_mode = settings.EMAIL_TEST_MODE if test_mode is None else test_mode
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(templates_dir or self._resolve_templates_dir())),
            autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=True),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.fastmail = fastmail or (None if self.test_mode else self._build_fastmail())

    @staticmethod
    def _resolve_templates_dir() -> Path:
        configured = Path(settings.EMAIL_TEMPLATES_DIR)
        if configured.is_dir():
            return configured
        return PACKAGE_TEMPLATES_DIR

    @staticmethod
    def _build_fastmail() -> FastMail:
        try:
            settings.validate_smtp_config()
            config = ConnectionConfig(
                MAIL_USERNAME=settings.EMAIL_SMTP_USERNAME or "",
                MAIL_PASSWORD=settings.EMAIL_SMTP_PASSWORD.get_secret_value()
                if settings.EMAIL_SMTP_PASSWORD
                else "",
                MAIL_FROM=settings.EMAIL_FROM_EMAIL,
                MAIL_FROM_NAME=settings.EMAIL_FROM_NAME,
                MAIL_PORT=settings.EMAIL_SMTP_PORT,
                MAIL_SERVER=settings.EMAIL_SMTP_HOST,
                MAIL_STARTTLS=settings.EMAIL_SMTP_USE_TLS,
                MAIL_SSL_TLS=settings.EMAIL_SMTP_USE_SSL,
                USE_CREDENTIALS=bool(settings.EMAIL_SMTP_USERNAME and settings.EMAIL_SMTP_PASSWORD),
                VALIDATE_CERTS=True,
            )
        except ValueError as e:
            logger.error("Failed to configure FastMail", error=str(e))
            raise ConfigurationError(f"Failed to configure email service: {e}") from e
        logger.info("FastMail configured")
        return FastMail(config)

    async def send_confirmation_email(
        self, email: str, display_name: str, link: str
    ) -> Outcome[None]:
        context = {
            "user_name": display_name or email.split("@")[0],
            "confirmation_url": link,
            "token_expires_hours": settings.EMAIL_CONFIRMATION_TOKEN_EXPIRE_HOURS,
            "app_name": settings.PROJECT_NAME,
        }
        html_content = self.render(f"{CONFIRMATION_TEMPLATE}.html", **context)
        text_content = self.render(f"{CONFIRMATION_TEMPLATE}.txt", **context)
        return await self._send(email, "Confirm your email address", html_content, text_content)

    def render(self, template_name: str, **context: Any) -> str:
        """Render ``template_name`` with ``context``.

        Raises:
            TemplateRenderError: If the template is missing or fails to render
        """
        try:
            return self.jinja_env.get_template(template_name).render(**context)
        except TemplateNotFound as e:
            logger.error("Template not found", template=template_name)
            raise TemplateRenderError(f"Template file not found: {template_name}") from e
        except TemplateError as e:
            logger.error("Template rendering failed", template=template_name, error=str(e))
            raise TemplateRenderError(f"Template rendering failed: {template_name}") from e

    async def _send(self, to_email: str, subject: str, html_content: str, text_content: str) -> Outcome[None]:
        if self.fastmail is None:
            logger.info(
                "Email sent in test mode",
                to_email=mask_email(to_email),
                subject=subject,
                html_length=len(html_content),
                text_length=len(text_content),
            )
            return Success(None)

        message = MessageSchema(
            subject=subject,
            recipients=[to_email],
            body=html_content,
            subtype=MessageType.html,
            alternative_body=text_content,
            multipart_subtype=MultipartSubtypeEnum.alternative,
        )
        try:
            await self.fastmail.send_message(message)
        except (ConnectionErrors, OSError, asyncio.TimeoutError) as e:
            logger.error(
                "Failed to send email",
                to_email=mask_email(to_email),
                subject=subject,
                error_type=type(e).__name__,
            )
            return Failure(ErrorKind.DELIVERY_ERROR, "Failed to deliver email.")

        logger.info("Email sent", to_email=mask_email(to_email), subject=subject)
        return Success(None)
