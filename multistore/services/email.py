import logging
import smtplib
from email.message import EmailMessage

from multistore.core.config import settings

OTP_TEMPLATE = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #333;">Your Verification Code</h2>
  <p>Please use the following code to verify your email address:</p>
  <div style="background-color: #f5f5f5; padding: 20px; text-align: center; font-size: 24px; font-weight: bold; letter-spacing: 5px; margin: 20px 0;">
    {code}
  </div>
  <p style="color: #666;">This code will expire in {minutes} minutes.</p>
  <p style="color: #666;">If you didn't request this code, please ignore this email.</p>
</div>
"""

def send_email(to_email: str, subject: str, html: str, text: str = None) -> bool:
    """Deliver a message over SMTP. Returns False when SMTP is not configured or delivery fails."""
    if not settings.SMTP_HOST:
        logging.info(f"SMTP not configured, skipping email to {to_email}")
        return False

    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = settings.SMTP_USER
    msg["To"] = to_email
    msg.set_content(text or subject)
    msg.add_alternative(html, subtype="html")

    try:
        if settings.SMTP_PORT == 465:
            server = smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10)
        else:
            server = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10)
            server.starttls()
        with server:
            if settings.SMTP_USER and settings.SMTP_PASS:
                server.login(settings.SMTP_USER, settings.SMTP_PASS)
            server.send_message(msg)
        logging.info(f"Email sent successfully to {to_email}")
        return True
    except (smtplib.SMTPException, OSError) as e:
        logging.warning(f"Failed to send email to {to_email}: {str(e)}")
        return False

def send_otp_email(to_email: str, code: str) -> bool:
    # Logged so development setups without SMTP can still sign in
    logging.info(f"OTP for {to_email}: {code}")
    return send_email(
        to_email,
        "Your verification code",
        OTP_TEMPLATE.format(code=code, minutes=settings.OTP_EXPIRY_MINUTES),
        text=f"Your verification code is {code}. It expires in {settings.OTP_EXPIRY_MINUTES} minutes.",
    )
