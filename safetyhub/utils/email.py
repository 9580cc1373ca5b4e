"""이메일 발송 유틸리티 — SMTP (aiosmtplib).

SMTP 설정은 config.py의 SMTP_* 환경 변수로 관리.
SMTP_FROM_EMAIL이 비어 있으면 발송하지 않고 False를 반환.
"""

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from safetyhub.config import settings


def email_enabled() -> bool:
    return bool(settings.SMTP_FROM_EMAIL)


async def send_email(
    to: str,
    subject: str,
    html: str,
    text: str | None = None,
) -> bool:
    """이메일 발송.

    Args:
        to: 수신자 이메일 주소
        subject: 제목
        html: HTML 본문
        text: 플레인텍스트 본문 (없으면 생략)

    Returns:
        bool: 발송 여부, SMTP 미설정 시 False

    Raises:
        aiosmtplib.SMTPException: SMTP 서버 오류
    """
    if not email_enabled():
        return False

    msg = MIMEMultipart("alternative")
    # 헤더 주입 방지, 줄바꿈 제거 — Header values must stay on one line
    msg["Subject"] = " ".join(subject.splitlines())
    msg["From"] = f"{settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_EMAIL}>"
    msg["To"] = to

    if text:
        msg.attach(MIMEText(text, "plain", "utf-8"))
    msg.attach(MIMEText(html, "html", "utf-8"))

    await aiosmtplib.send(
        msg,
        hostname=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USER or None,
        password=settings.SMTP_PASSWORD or None,
        start_tls=True,
    )
    return True
