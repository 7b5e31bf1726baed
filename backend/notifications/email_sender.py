"""
Email sending via Resend API for the notification system.

Builds the HTML bodies for reminders, report-delay notices and digests,
and sends them through Resend.
"""

import os
from html import escape
from typing import Any, Dict, List, Optional, Protocol

import resend

from config.notification_defaults import STATUS_LABELS, URGENCY_COLORS
from models.delivery import SendResult
from models.digest import DailyDigest, DigestItem, WeeklyDigest
from shared.utils import format_turkish_date, format_week_range, urgency_label

# Frontend base URL for links in emails
FRONTEND_BASE_URL = os.getenv('FRONTEND_BASE_URL', 'https://kampanyatakvimi.net.tr')

SENDER_NAME = 'Kampanya Takvimi'


class EmailTransport(Protocol):
    """Outbound email collaborator used by the dispatcher."""

    def is_configured(self) -> bool: ...

    def send(
        self, to: str, subject: str, html: str, cc: Optional[List[str]] = None
    ) -> SendResult: ...


class ResendEmailTransport:
    """EmailTransport backed by the Resend API."""

    def __init__(self, api_key: Optional[str] = None, from_email: Optional[str] = None):
        self.api_key = api_key if api_key is not None else os.getenv('RESEND_API_KEY')
        self.from_email = from_email or os.getenv(
            'NOTIFICATION_FROM_EMAIL', 'hatirlatma@kampanyatakvimi.net.tr'
        )

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def send(
        self, to: str, subject: str, html: str, cc: Optional[List[str]] = None
    ) -> SendResult:
        """
        Send one email.

        Args:
            to: Recipient email address
            subject: Subject line
            html: HTML body
            cc: Optional CC addresses

        Returns:
            SendResult with the Resend message id on success, the error text otherwise
        """
        if not self.api_key:
            return SendResult(success=False, error='Resend API key is not configured')

        params: Dict[str, Any] = {
            "from": f"{SENDER_NAME} <{self.from_email}>",
            "to": to,
            "subject": subject,
            "html": html,
        }
        if cc:
            params["cc"] = cc

        try:
            resend.api_key = self.api_key
            response = resend.Emails.send(params)
            return SendResult(success=True, message_id=response.get('id'))
        except Exception as e:
            return SendResult(success=False, error=str(e))


# ── HTML building ──────────────────────────────────────────────────────


def _wrap_html(title: str, header: str, content: str) -> str:
    """Shared email shell: header bar, content, footer."""
    return f"""
<!DOCTYPE html>
<html lang="tr">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
    <style>
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif;
            line-height: 1.6;
            color: #333;
            max-width: 600px;
            margin: 0 auto;
            padding: 20px;
            background-color: #f5f5f5;
        }}
        .container {{
            background-color: white;
            padding: 30px;
            border-radius: 8px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }}
        .header {{
            border-bottom: 3px solid #2563eb;
            padding-bottom: 15px;
            margin-bottom: 25px;
        }}
        h1 {{
            margin: 0;
            color: #1e40af;
            font-size: 22px;
        }}
        h2 {{
            font-size: 16px;
            color: #1f2937;
            margin: 25px 0 10px 0;
        }}
        .item {{
            border-left: 4px solid #e5e7eb;
            padding: 10px 15px;
            margin-bottom: 12px;
            background-color: #f9fafb;
        }}
        .item-title {{
            font-weight: 600;
            color: #1f2937;
        }}
        .item-meta {{
            color: #6b7280;
            font-size: 13px;
        }}
        .badge {{
            display: inline-block;
            padding: 2px 10px;
            border-radius: 12px;
            font-size: 12px;
            font-weight: 500;
            color: white;
        }}
        .empty {{
            color: #9ca3af;
            font-style: italic;
        }}
        .footer {{
            margin-top: 30px;
            padding-top: 20px;
            border-top: 1px solid #e5e7eb;
            font-size: 12px;
            color: #9ca3af;
            text-align: center;
        }}
        .footer a {{
            color: #2563eb;
            text-decoration: none;
        }}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>{escape(header)}</h1>
        </div>
{content}
        <div class="footer">
            <p>
                Bu e-posta <a href="{FRONTEND_BASE_URL}">{SENDER_NAME}</a> tarafından otomatik olarak gönderilmiştir.
            </p>
        </div>
    </div>
</body>
</html>
"""


def _urgency_badge(urgency: str) -> str:
    value = str(getattr(urgency, 'value', urgency))
    color = URGENCY_COLORS.get(value, '#6B7280')
    return f'<span class="badge" style="background-color: {color};">{escape(urgency_label(value))}</span>'


def build_reminder_html(
    assignee_name: str,
    event_title: str,
    event_type_label: str,
    urgency: str,
    days_elapsed: int,
    body: str,
) -> str:
    """
    Build HTML for a per-item reminder.

    Args:
        assignee_name: Greeting name
        event_title: Work item title
        event_type_label: 'Kampanya' / 'Analitik Görev'
        urgency: Stored urgency value
        days_elapsed: Whole days since the item was created
        body: Rendered body template (plain text, newlines become paragraphs)

    Returns:
        HTML string
    """
    paragraphs = ''.join(
        f'        <p>{escape(line)}</p>\n' for line in body.split('\n') if line.strip()
    )
    content = f"""
        <p>Merhaba <strong>{escape(assignee_name)}</strong>,</p>
        <div class="item">
            <div class="item-title">{escape(event_title)}</div>
            <div class="item-meta">{escape(event_type_label)} • {days_elapsed} gün önce oluşturuldu • {_urgency_badge(urgency)}</div>
        </div>
{paragraphs}"""
    return _wrap_html('Görev Hatırlatması', '⏰ Görev Hatırlatması', content)


def build_report_delay_html(
    assignee_name: str,
    report_title: str,
    campaign_title: Optional[str],
    days_overdue: int,
) -> str:
    """Build HTML for an overdue report notice."""
    campaign_line = (
        f'<div class="item-meta">Kampanya: {escape(campaign_title)}</div>' if campaign_title else ''
    )
    overdue_text = 'bugün' if days_overdue == 0 else f'{days_overdue} gün'
    content = f"""
        <p>Merhaba <strong>{escape(assignee_name)}</strong>,</p>
        <p>Aşağıdaki raporun teslim tarihi geçti ({overdue_text} gecikme).</p>
        <div class="item" style="border-left-color: #EF4444;">
            <div class="item-title">{escape(report_title)}</div>
            {campaign_line}
        </div>
        <p>Lütfen raporu en kısa sürede tamamlayın.</p>
"""
    return _wrap_html('Rapor Gecikmesi', '⚠️ Rapor Gecikmesi', content)


def _digest_item_html(item: DigestItem, show_date: bool = False) -> str:
    date_text = f' • {format_turkish_date(item.date)}' if show_date else ''
    status_text = STATUS_LABELS.get(item.status, item.status)
    delay_text = f' • {escape(item.delay_text)}' if item.delay_text and not show_date else ''
    return f"""
        <div class="item">
            <div class="item-title">{escape(item.title)}</div>
            <div class="item-meta">{escape(item.assignee_name)} • {escape(status_text)}{date_text}{delay_text} • {_urgency_badge(item.urgency)}</div>
        </div>
"""


def _section(title: str, rows: List[str], empty_text: str) -> str:
    body = ''.join(rows) if rows else f'        <p class="empty">{empty_text}</p>\n'
    return f'        <h2>{escape(title)}</h2>\n{body}'


def build_daily_digest_html(recipient_name: str, digest: DailyDigest) -> str:
    """Build HTML for the end-of-day digest."""
    content = f"""
        <p>Merhaba <strong>{escape(recipient_name)}</strong>,</p>
        <p>{format_turkish_date(digest.digest_date)} tarihli kampanyaların özeti:
        <strong>{digest.total_completed}</strong> tamamlandı,
        <strong>{digest.total_incomplete}</strong> tamamlanmadı.</p>
"""
    content += _section(
        f'✅ Tamamlananlar ({digest.total_completed})',
        [_digest_item_html(item) for item in digest.completed],
        'Bugün tamamlanan kampanya yok.',
    )
    content += _section(
        f'⏳ Tamamlanmayanlar ({digest.total_incomplete})',
        [_digest_item_html(item) for item in digest.incomplete],
        'Bekleyen kampanya yok.',
    )
    return _wrap_html('Gün Sonu Bülteni', '📋 Gün Sonu Bülteni', content)


def build_weekly_digest_html(recipient_name: str, digest: WeeklyDigest) -> str:
    """Build HTML for the weekly digest."""
    week_range = format_week_range(digest.week_start, digest.week_end)
    overdue_rows = [
        f"""
        <div class="item" style="border-left-color: #EF4444;">
            <div class="item-title">{escape(report.title)}</div>
            <div class="item-meta">{escape(report.assignee_name)} • {report.days_overdue} gün gecikti{' • ' + escape(report.campaign_title) if report.campaign_title else ''}</div>
        </div>
"""
        for report in digest.overdue_reports
    ]

    content = f"""
        <p>Merhaba <strong>{escape(recipient_name)}</strong>,</p>
        <p>{week_range} haftasının özeti.</p>
"""
    content += _section(
        f'⚠️ Geciken Raporlar ({digest.total_overdue_reports})',
        overdue_rows,
        'Geciken rapor yok.',
    )
    content += _section(
        f'📅 Bu Haftanın Kampanyaları ({digest.total_this_week_campaigns})',
        [_digest_item_html(item, show_date=True) for item in digest.this_week_campaigns],
        'Bu hafta planlanmış kampanya yok.',
    )
    return _wrap_html('Haftalık Bülten', '📊 Haftalık Bülten', content)


def daily_digest_subject(digest: DailyDigest) -> str:
    return f"Gün Sonu Bülteni - {digest.digest_date.strftime('%d.%m.%Y')}"


def weekly_digest_subject(digest: WeeklyDigest) -> str:
    return f"📊 Haftalık Bülten - {format_week_range(digest.week_start, digest.week_end)}"
