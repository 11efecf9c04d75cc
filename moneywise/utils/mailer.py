# moneywise/utils/mailer.py
import asyncio
import base64
import json
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional

import sendgrid
from sendgrid.helpers.mail import Attachment, Disposition, FileContent, FileName, FileType, Mail

from moneywise.core.config import settings

logger = logging.getLogger(__name__)


async def send_email_via_sendgrid(
    to_email: str,
    subject: str,
    body: str,
    attachment: Optional[Attachment] = None,
) -> bool:
    """
    Send an HTML email through SendGrid without blocking the event loop.
    Returns False instead of raising so callers can report a soft failure.
    """
    if not settings.SENDGRID_API_KEY:
        logger.warning("SendGrid API key not configured. Email not sent.")
        return False

    if not to_email or "@" not in to_email:
        logger.error(f"Invalid email format: {to_email}")
        return False

    try:
        logger.info(f"Attempting to send email to {to_email}")
        message = Mail(
            from_email=(settings.EMAIL_FROM, settings.EMAIL_FROM_NAME),
            to_emails=to_email,
            subject=subject,
            html_content=body
        )
        message.reply_to = settings.EMAIL_FROM
        if attachment is not None:
            message.attachment = attachment

        sg = sendgrid.SendGridAPIClient(api_key=settings.SENDGRID_API_KEY)

        loop = asyncio.get_running_loop()
        with ThreadPoolExecutor() as executor:
            response = await loop.run_in_executor(executor, sg.send, message)

        if response.status_code == 202:
            logger.info(f"✅ Email sent successfully to {to_email}")
            return True
        logger.error(f"❌ Failed to send email. Status code: {response.status_code}")
        logger.error(f"Response body: {response.body}")
        return False

    except Exception as e:
        logger.error(f"❌ Exception while sending email to {to_email}: {str(e)}")
        return False


def _money(value: float) -> str:
    return f"{value:,.2f}"


def render_report_email(payload: Dict[str, Any], recipient_name: str) -> str:
    """Short HTML digest of a report payload; the full payload goes as a JSON attachment."""
    summary = payload["summary"]
    insights = payload["insights"]
    meta = payload["metadata"]

    top = insights["top_expense_category"]
    top_line = f"{top['name']} ({_money(top['amount'])})" if top else "No expenses recorded"

    rows = "".join(
        f"<tr><td>{c['name']}</td><td style='text-align:right'>{_money(c['amount'])}</td>"
        f"<td style='text-align:right'>{c['count']}</td></tr>"
        for c in payload["category_totals"]
    )
    alerts = "".join(f"<li>Budget {b['id']}: {b['usage_percentage']:.1f}% used</li>" for b in insights["budget_alerts"])
    behind = "".join(f"<li>{g['name']}: {g['progress']:.1f}% saved</li>" for g in insights["savings_goals_behind"])

    return f"""
    <html>
    <body style="font-family: Arial, sans-serif; color: #333;">
        <h2 style="color: #2563eb;">MoneyWise Financial Report</h2>
        <p>Hello <strong>{recipient_name}</strong>,</p>
        <p>Here is your financial report for {meta['period_start']} to {meta['period_end']}.</p>
        <ul>
            <li>Total income: {_money(summary['total_income'])}</li>
            <li>Total expenses: {_money(summary['total_expense'])}</li>
            <li>Net balance: {_money(summary['net_balance'])}</li>
            <li>Savings rate: {insights['savings_rate']:.1f}%</li>
            <li>Largest expense category: {top_line}</li>
        </ul>
        <h3>Spending by category</h3>
        <table cellpadding="4">
            <tr><th>Category</th><th>Amount</th><th>Transactions</th></tr>
            {rows}
        </table>
        {f"<h3>Budgets near their limit</h3><ul>{alerts}</ul>" if alerts else ""}
        {f"<h3>Goals behind schedule</h3><ul>{behind}</ul>" if behind else ""}
        <p><em>The MoneyWise Team</em></p>
    </body>
    </html>
    """


async def send_report_email(to_email: str, recipient_name: str, payload: Dict[str, Any]) -> bool:
    meta = payload["metadata"]
    attachment = Attachment(
        FileContent(base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")),
        FileName(f"financial-report-{meta['period_start']}-{meta['period_end']}.json"),
        FileType("application/json"),
        Disposition("attachment"),
    )
    subject = f"MoneyWise - Financial Report {meta['period_start']} to {meta['period_end']}"
    return await send_email_via_sendgrid(
        to_email, subject, render_report_email(payload, recipient_name), attachment
    )
