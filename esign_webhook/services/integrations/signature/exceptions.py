"""
Exceções do fluxo de reconciliação de webhooks de assinatura.

Cada erro carrega o status HTTP e a mensagem em texto puro devolvida ao provider.
"""


class SignatureWebhookError(Exception):
    """Erro base do webhook de assinatura"""
    http_status = 500
    default_message = 'Internal error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingDocumentIdentifier(SignatureWebhookError):
    """Payload sem nenhum campo de identificação de documento conhecido"""
    http_status = 400
    default_message = 'Missing document ID'


class UnknownDocument(SignatureWebhookError):
    """Evento bem formado para um documento que não existe no banco"""
    http_status = 400

    def __init__(self, document_id):
        self.document_id = document_id
        super().__init__(f'Document not found: {document_id}')


class PersistenceFailure(SignatureWebhookError):
    """Falha ao ler ou gravar o contrato. O provider deve reenviar o evento."""
    http_status = 500
    default_message = 'Database error'


class NotificationFailure(SignatureWebhookError):
    """Falha no envio de notificação. Apenas logada, nunca devolvida ao provider."""
    default_message = 'Notification error'


class InvalidWebhookSignature(SignatureWebhookError):
    """Header X-Signature não confere com o HMAC do corpo"""
    http_status = 401
    default_message = 'Unauthorized'
