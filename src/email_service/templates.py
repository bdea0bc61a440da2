from dataclasses import dataclass

from src.guests.dtos import ConfirmationKind, WeddingEventDTO


@dataclass
class EmailTemplates:
    # Attendance confirmed
    ATTENDING_SUBJECT = "Your RSVP for {event_title} - Confirmed"
    ATTENDING_HTML = """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
        <div style="text-align: center; margin-bottom: 30px;">
            <h1 style="color: #d4a373;">Thank You!</h1>
        </div>

        <p>Dear {guest_name},</p>

        <p>Thank you for confirming your attendance at {event_title}!</p>

        <div style="background-color: #fefae0; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <h2 style="color: #bc6c25; margin-top: 0;">Wedding Details</h2>
            <p><strong>Date:</strong> {event_date}</p>
            <p><strong>Location:</strong> {event_location}</p>
        </div>

        <p>We can't wait to celebrate with you!</p>

        <p>With love,<br>{couple_names}</p>
    </body>
    </html>
    """
    ATTENDING_TEXT = """
    Dear {guest_name},

    Thank you for confirming your attendance at {event_title}!

    Wedding Details:
    - Date: {event_date}
    - Location: {event_location}

    We can't wait to celebrate with you!

    With love,
    {couple_names}
    """

    # Attendance declined
    DECLINED_SUBJECT = "Your RSVP for {event_title} - Declined"
    DECLINED_HTML = """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
        <p>Dear {guest_name},</p>

        <p>We're sorry you can't make it to {event_title}. Your response has been recorded.</p>

        <p>You will be missed, and we hope to celebrate with you another time.</p>

        <p>With love,<br>{couple_names}</p>
    </body>
    </html>
    """
    DECLINED_TEXT = """
    Dear {guest_name},

    We're sorry you can't make it to {event_title}. Your response has been recorded.

    You will be missed, and we hope to celebrate with you another time.

    With love,
    {couple_names}
    """

    # Travel and accommodation details received
    DETAILS_SUBJECT = "Your travel details for {event_title}"
    DETAILS_HTML = """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
        <p>Dear {guest_name},</p>

        <p>Thank you for sharing your travel and accommodation details for {event_title}.</p>

        <p>We will be in touch if we need anything else.</p>

        <p>With love,<br>{couple_names}</p>
    </body>
    </html>
    """
    DETAILS_TEXT = """
    Dear {guest_name},

    Thank you for sharing your travel and accommodation details for {event_title}.

    We will be in touch if we need anything else.

    With love,
    {couple_names}
    """

    @classmethod
    def get_confirmation_templates(cls, kind: ConfirmationKind) -> tuple[str, str, str]:
        """Returns (subject, html, text) for the given confirmation kind."""
        prefix = kind.name
        subject = getattr(cls, f"{prefix}_SUBJECT")
        html = getattr(cls, f"{prefix}_HTML")
        text = getattr(cls, f"{prefix}_TEXT")
        return subject, html, text

    @classmethod
    def render_confirmation(
        cls,
        kind: ConfirmationKind,
        guest_name: str,
        event: WeddingEventDTO,
    ) -> tuple[str, str, str]:
        subject, html_template, text_template = cls.get_confirmation_templates(kind)
        context = {
            "guest_name": guest_name,
            "event_title": event.title,
            "couple_names": event.couple_names,
            "event_date": event.start_date.isoformat() if event.start_date else "To be announced",
            "event_location": event.location or "To be announced",
        }
        return (
            subject.format(**context),
            html_template.format(**context),
            text_template.format(**context),
        )
