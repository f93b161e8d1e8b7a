"""Invoice (nota) generation and sharing for a customer's billing period"""

import random
import re
from dataclasses import dataclass
from datetime import date
from typing import List, Optional
from urllib.parse import quote

from wifi_billing.config import settings
from wifi_billing.domain.models import Customer, Period
from wifi_billing.utils.currency import format_rupiah, format_thousands
from wifi_billing.utils.date_utils import format_date_id, month_name, period_label

ITEM_DESCRIPTION = "Langganan WiFi"
RECEIPT_WIDTH = 32


@dataclass
class InvoiceLine:
    description: str
    detail: str
    amount: int


@dataclass
class Invoice:
    """Printable and shareable payment notice"""

    number: str
    issued_on: date
    period: Period
    business_name: str
    business_tagline: str
    customer_name: str
    customer_address: str
    customer_phone: str
    lines: List[InvoiceLine]
    due_date_label: str

    @property
    def total(self) -> int:
        return sum(line.amount for line in self.lines)

    @property
    def period_label(self) -> str:
        return period_label(self.period.month, self.period.year)

    @property
    def filename(self) -> str:
        slug = re.sub(r"\s+", "-", self.customer_name)
        return f"Nota-{slug}-{month_name(self.period.month)}-{self.period.year}.png"

    def share_message(self) -> str:
        return (
            f"Halo {self.customer_name},\n\n"
            f"Berikut nota pembayaran WiFi {self.business_name.lower()} bulan {self.period_label}.\n\n"
            f"Tagihan: Rp{format_thousands(self.total)}\n"
            f"Jatuh tempo: {self.due_date_label}\n\n"
            "Mohon segera melakukan pembayaran.\n\n"
            "Terima kasih! 🙏"
        )

    def whatsapp_url(self) -> Optional[str]:
        """wa.me deep link with the share message; None without a phone number"""
        digits = re.sub(r"\D", "", self.customer_phone)
        if not digits:
            return None
        return f"https://wa.me/{digits}?text={quote(self.share_message(), safe='')}"

    def render_text(self) -> str:
        """Fixed-width receipt for thermal printers and plain-text sharing"""

        def row(left: str, right: str) -> str:
            gap = max(RECEIPT_WIDTH - len(left) - len(right), 1)
            return f"{left}{' ' * gap}{right}"

        solid = "=" * RECEIPT_WIDTH
        dashed = "-" * RECEIPT_WIDTH
        out = [
            self.business_name.center(RECEIPT_WIDTH).rstrip(),
            self.business_tagline.center(RECEIPT_WIDTH).rstrip(),
            solid,
            row("No. Nota", self.number),
            row("Tanggal", format_date_id(self.issued_on)),
            row("Periode", self.period_label),
            dashed,
            "PELANGGAN:",
            self.customer_name,
        ]
        if self.customer_address:
            out.append(self.customer_address)
        if self.customer_phone:
            out.append(self.customer_phone)
        out += [dashed, row("ITEM", "HARGA"), solid]
        for line in self.lines:
            out.append(row(line.description, format_thousands(line.amount)))
            out.append(f"  {line.detail}")
        out += [
            solid,
            row("TOTAL", format_rupiah(self.total)),
            dashed,
            "JATUH TEMPO".center(RECEIPT_WIDTH).rstrip(),
            self.due_date_label.center(RECEIPT_WIDTH).rstrip(),
            dashed,
            "Terima kasih atas kepercayaan Anda".center(RECEIPT_WIDTH).rstrip(),
        ]
        return "\n".join(out)


def invoice_number(period: Period, serial: int) -> str:
    return f"INV{period.month:02d}{period.year}-{serial:04d}"


def build_invoice(
    customer: Customer,
    period: Period,
    issued_on: Optional[date] = None,
    serial: Optional[int] = None,
) -> Invoice:
    """
    Build the nota for one customer and period.

    The serial is random unless given; invoice numbers are not tracked in
    the store.
    """
    if serial is None:
        serial = random.randint(0, 9998)
    if issued_on is None:
        issued_on = date.today()

    label = period_label(period.month, period.year)
    return Invoice(
        number=invoice_number(period, serial),
        issued_on=issued_on,
        period=period,
        business_name=settings.business_name,
        business_tagline=settings.business_tagline,
        customer_name=customer.name,
        customer_address=customer.address or "",
        customer_phone=customer.phone or "",
        lines=[InvoiceLine(description=ITEM_DESCRIPTION, detail=label, amount=customer.monthly_fee)],
        due_date_label=f"{customer.payment_day} {label}",
    )
