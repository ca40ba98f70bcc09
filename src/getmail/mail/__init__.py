"""Mailbox access over IMAP."""

from getmail.mail.client import MailOverview, MailResult, MailSearch, check_subject_pattern

__all__ = ["MailOverview", "MailResult", "MailSearch", "check_subject_pattern"]
