# This module defines notification defaults as module-level constants.
# They seed a fresh settings document and label values shown in emails.
# Keys of the urgency tables are the stored urgency values.

DEFAULT_TIMEZONE = "Europe/Istanbul"

# Saturday and Sunday (datetime.weekday numbering, Monday = 0)
DEFAULT_NON_SENDING_WEEKDAYS = (5, 6)

# Whole days since creation before a reminder is due, per urgency.
DEFAULT_REMINDER_THRESHOLDS = {
    "Very High": 1,
    "High": 2,
    "Medium": 2,
    "Low": 2,
}

DEFAULT_EMAIL_SUBJECT_TEMPLATE = "⏰ Hatırlatma: {title}"

DEFAULT_EMAIL_BODY_TEMPLATE = (
    'Lütfen "{title}" görevinizin durumunu kontrol edin ve gerekli aksiyonları alın.\n\n'
    "Görev üzerinden {days} gün geçti ve aciliyet seviyesi {urgency} olarak işaretlendi.\n\n"
    "Herhangi bir sorun veya gecikme varsa lütfen yöneticinizle iletişime geçin."
)

DEFAULT_SMS_TEMPLATE = "{title} görevi size atandı. Kampanya Takvimi"

# Placeholders recognised by each template kind. Anything else stays literal.
TEMPLATE_PLACEHOLDERS = {
    "email_subject": ("title", "urgency", "days", "assignee", "eventType"),
    "email_body": ("title", "urgency", "days", "assignee", "eventType"),
    "sms": ("title", "urgency", "days", "assignee", "eventType"),
}

URGENCY_LABELS = {
    "Very High": "Çok Yüksek",
    "High": "Yüksek",
    "Medium": "Orta",
    "Low": "Düşük",
}

URGENCY_COLORS = {
    "Very High": "#EF4444",
    "High": "#F97316",
    "Medium": "#3B82F6",
    "Low": "#6B7280",
}

EVENT_TYPE_LABELS = {
    "campaign": "Kampanya",
    "analytics": "Analitik Görev",
    "report": "Rapor",
}

STATUS_LABELS = {
    "Planned": "Planlandı",
    "Done": "Tamamlandı",
    "Cancelled": "İptal Edildi",
    "Pending": "Bekliyor",
}

UNASSIGNED_LABEL = "Atanmamış"
UNKNOWN_ASSIGNEE_LABEL = "Bilinmiyor"

TURKISH_MONTHS = (
    "Ocak",
    "Şubat",
    "Mart",
    "Nisan",
    "Mayıs",
    "Haziran",
    "Temmuz",
    "Ağustos",
    "Eylül",
    "Ekim",
    "Kasım",
    "Aralık",
)

# Pause between consecutive per-item sends (seconds), provider rate limit.
DEFAULT_SEND_DELAY_SECONDS = 0.5
