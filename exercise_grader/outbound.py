"""
Outbound Messages - Feedback content for participants

The grader only builds the messages; sending them is someone else's job.
"""

from dataclasses import dataclass


@dataclass
class OutboundMessage:
    sender: str
    recipient: str
    subject: str
    body: str


def build_feedback(grade, sender: str, subject: str) -> OutboundMessage:
    """Feedback message for one graded unit"""
    lines = [
        f"Message ID: {grade.message_id}",
        f"Grade: {grade.result.score}",
        "",
        "Feedback:",
        grade.result.explanation,
    ]
    return OutboundMessage(
        sender=sender,
        recipient=grade.sender,
        subject=subject,
        body="\n".join(lines),
    )
