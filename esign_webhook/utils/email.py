"""
Email Service - Send emails via SMTP or Resend with Jinja2 templates
"""
import os
import smtplib
import logging
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional

import requests
from jinja2 import Environment, FileSystemLoader, select_autoescape

from esign_webhook.config import EmailSettings

logger = logging.getLogger(__name__)

# Template configuration
TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), 'templates', 'email')

# Initialize Jinja2 environment
jinja_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(['html', 'xml'])
)

SUPPORTED_PROVIDERS = ('smtp', 'resend')


class EmailService:
    """Service for sending emails using SMTP/Resend and Jinja2 templates"""

    def __init__(self, settings: EmailSettings):
        self.settings = settings

    @property
    def enabled(self) -> bool:
        return self.settings.provider in SUPPORTED_PROVIDERS

    @property
    def sender(self) -> str:
        return f"{self.settings.from_name} <{self.settings.from_email}>"

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None
    ) -> bool:
        """
        Send email through the configured provider.

        Args:
            to_email: Recipient email address
            subject: Email subject
            html_content: HTML email body
            text_content: Plain text email body (optional)

        Returns:
            True if email sent successfully, False otherwise
        """
        if not self.enabled:
            logger.info(f"Email provider not configured; skipping email to {to_email}: {subject}")
            return False

        try:
            if self.settings.provider == 'resend':
                self._send_via_resend(to_email, subject, html_content, text_content)
            else:
                self._send_via_smtp(to_email, subject, html_content, text_content)

            logger.info(f"Email sent successfully to {to_email}: {subject}")
            return True

        except (smtplib.SMTPException, OSError, requests.RequestException) as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False

    def _send_via_smtp(self, to_email, subject, html_content, text_content):
        msg = MIMEMultipart('alternative')
        msg['From'] = self.sender
        msg['To'] = to_email
        msg['Subject'] = subject

        # Add plain text version
        if text_content:
            msg.attach(MIMEText(text_content, 'plain'))

        # Add HTML version
        msg.attach(MIMEText(html_content, 'html'))

        server = smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=self.settings.timeout)
        try:
            server.starttls()
            if self.settings.smtp_user:
                server.login(self.settings.smtp_user, self.settings.smtp_pass)
            server.send_message(msg)
        finally:
            server.quit()

    def _send_via_resend(self, to_email, subject, html_content, text_content):
        payload = {
            'from': self.sender,
            'to': [to_email],
            'subject': subject,
            'html': html_content,
        }
        if text_content:
            payload['text'] = text_content

        response = requests.post(
            self.settings.resend_api_url,
            headers={
                'Authorization': f'Bearer {self.settings.api_key}',
                'Content-Type': 'application/json'
            },
            json=payload,
            timeout=self.settings.timeout
        )
        response.raise_for_status()

    def send_document_signed_email(
        self,
        to_email: str,
        client_name: str,
        contract_number: str,
        signed_at: str,
        signer_name: Optional[str] = None
    ) -> bool:
        """
        Send "contract signed" email to the client.

        Args:
            to_email: Recipient email address
            client_name: Client name used in the greeting
            contract_number: Rental contract number
            signed_at: Signing date already formatted (dd/mm/YYYY)
            signer_name: Name of the signer that completed the document

        Returns:
            True if email sent successfully
        """
        subject = f"Contrato Assinado - {contract_number}"

        template = jinja_env.get_template('document_signed.html')
        html_content = template.render(
            client_name=client_name,
            contract_number=contract_number,
            signed_at=signed_at,
            signer_name=signer_name,
        )

        text_content = f"""
Olá {client_name},

Seu contrato foi assinado com sucesso por todas as partes!

Detalhes:
- Contrato: {contract_number}
- Data de Assinatura: {signed_at}
- Status: Ativo

Sua locação está agora oficialmente ativa. Você pode retirar o veículo conforme combinado.

Atenciosamente,
Equipe Master Brasil
        """.strip()

        return self.send_email(to_email, subject, html_content, text_content)

    def send_document_cancelled_email(
        self,
        to_email: str,
        recipient_name: str,
        contract_number: str,
        reason: str
    ) -> bool:
        """
        Send "signature cancelled" email to the franchisee.

        Args:
            to_email: Recipient email address
            recipient_name: Franchisee name
            contract_number: Rental contract number
            reason: Vendor status that cancelled the document (rejected, expired)

        Returns:
            True if email sent successfully
        """
        subject = f"Assinatura Cancelada - Contrato {contract_number}"

        template = jinja_env.get_template('document_cancelled.html')
        html_content = template.render(
            recipient_name=recipient_name,
            contract_number=contract_number,
            reason=reason,
        )

        text_content = f"""
Olá {recipient_name},

A assinatura eletrônica do contrato {contract_number} foi cancelada ({reason}).

Será necessário gerar e enviar um novo documento para assinatura.

Atenciosamente,
Equipe Master Brasil
        """.strip()

        return self.send_email(to_email, subject, html_content, text_content)
