"""Ticket entity — the conversation Help Scout is currently showing."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Ticket:
    id: str
    number: str | None = None
    subject: str | None = None
    type: str | None = None
    source_type: str | None = None
    customer_email: str | None = None

    @classmethod
    def from_payload(cls, ticket: dict, customer: dict | None = None) -> "Ticket | None":
        """Build a Ticket from the Dynamic App request body.

        Returns None when the payload carries no usable ticket id.
        """
        if not isinstance(ticket, dict):
            return None
        raw_id = ticket.get("id")
        if raw_id is None or not str(raw_id).strip():
            return None

        source = ticket.get("source")
        source_type = source.get("type") if isinstance(source, dict) else None
        ticket_type = ticket.get("type")

        email = None
        if isinstance(customer, dict):
            email = customer.get("email")
            if not email and isinstance(customer.get("emails"), list) and customer["emails"]:
                email = customer["emails"][0]

        return cls(
            id=str(raw_id).strip(),
            number=str(ticket["number"]) if ticket.get("number") is not None else None,
            subject=ticket.get("subject"),
            type=ticket_type if isinstance(ticket_type, str) else None,
            source_type=source_type if isinstance(source_type, str) else None,
            customer_email=email if isinstance(email, str) else None,
        )

    def is_chat(self) -> bool:
        return any(
            (value or "").strip().lower() == "chat"
            for value in (self.type, self.source_type)
        )

    @property
    def display_number(self) -> str:
        return self.number or self.id
