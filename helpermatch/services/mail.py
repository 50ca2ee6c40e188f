import base64

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Attachment, Disposition, FileContent, FileName, FileType, Mail
from flask import current_app


class MailNotConfigured(RuntimeError):
    pass


def send_mail(to_email, subject, html, attachments=None):
    """Send one message; ``attachments`` is a list of (filename, content, mime type)."""
    api_key = current_app.config.get('SENDGRID_API_KEY')
    if not api_key:
        raise MailNotConfigured("SENDGRID_API_KEY is not set")

    sg = SendGridAPIClient(api_key=api_key)
    message = Mail(from_email=(current_app.config['MAIL_FROM'], current_app.config['MAIL_FROM_NAME']),
                   to_emails=to_email,
                   subject=subject,
                   html_content=html)
    for filename, content, mime_type in attachments or []:
        raw = content.encode("utf-8") if isinstance(content, str) else content
        message.add_attachment(Attachment(
            FileContent(base64.b64encode(raw).decode("ascii")),
            FileName(filename),
            FileType(mime_type),
            Disposition("attachment"),
        ))
    resp = sg.send(message)
    headers = getattr(resp, 'headers', None)
    return resp.status_code, headers.get("X-Message-Id") if headers is not None else None
