"""
Email Templates

Subjects and HTML bodies for every message the service sends.
"""

from datetime import datetime
from typing import Optional, Tuple

from src.domain.entities import Task


def _format_time(moment: Optional[datetime]) -> str:
    if moment is None:
        return "No due date"
    return moment.strftime("%Y-%m-%d %H:%M UTC")


def reminder_email(task: Task) -> Tuple[str, str]:
    """Reminder for a task whose reminder time has come"""
    subject = f"Reminder for {task.title}"
    body = f"""
    <html>
      <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <h2 style="color: #4CAF50;">Task Reminder</h2>
        <p>This is a friendly reminder about your task:</p>
        <div style="border: 1px solid #ddd; padding: 20px; margin: 15px 0; border-radius: 8px;">
          <h3 style="margin: 0;">{task.title}</h3>
          <p><strong>Description:</strong> {task.description or "No description"}</p>
          <p><strong>Status:</strong> {task.status.value}</p>
          <p><strong>Due Date:</strong> {_format_time(task.due_date)}</p>
        </div>
        <p>Don't forget to complete this task!</p>
      </body>
    </html>
    """
    return subject, body


def verification_code_email(code: str, ttl_minutes: int) -> Tuple[str, str]:
    subject = "Your Verification Code"
    body = f"""
    <html>
      <body style="font-family: Arial, sans-serif; color: #333;">
        <h2>Verify your email address</h2>
        <p>Use the following code to verify your email:</p>
        <p style="font-size: 28px; letter-spacing: 6px; font-weight: bold;">{code}</p>
        <p>This code expires in {ttl_minutes} minutes and can be used once.</p>
        <small>If you did not request this code you can ignore this email.</small>
      </body>
    </html>
    """
    return subject, body


def password_reset_email(reset_link: str, ttl_minutes: int) -> Tuple[str, str]:
    subject = "Reset Your Password"
    body = f"""
    <html>
      <body style="font-family: Arial, sans-serif; color: #333;">
        <h2>Password reset requested</h2>
        <p>Click the link below to choose a new password:</p>
        <p><a href="{reset_link}">{reset_link}</a></p>
        <p>The link expires in {ttl_minutes} minutes and can be used once.</p>
        <small>If you did not request a password reset you can ignore this email.</small>
      </body>
    </html>
    """
    return subject, body
