"""Currency and number formatting for human-readable insights"""


def format_thousands(value: float) -> str:
    """Round to a whole number and group thousands with dots (1.234.567)"""
    rounded = int(round(value))
    grouped = f"{abs(rounded):,}".replace(",", ".")
    return f"-{grouped}" if rounded < 0 else grouped


def format_rupiah(value: float) -> str:
    """Render an amount as Rupiah, e.g. Rp 2.500.000"""
    return f"Rp {format_thousands(value)}"
