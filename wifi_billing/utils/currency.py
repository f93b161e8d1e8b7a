"""Rupiah formatting"""


def format_thousands(amount: int) -> str:
    """Group digits with dots, Indonesian style: 100000 -> 100.000"""
    sign = "-" if amount < 0 else ""
    return sign + f"{abs(amount):,}".replace(",", ".")


def format_rupiah(amount: int) -> str:
    return f"Rp{format_thousands(amount)}"
