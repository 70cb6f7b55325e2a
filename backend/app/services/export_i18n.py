"""Translation dictionary for report exports (id/en)."""
from __future__ import annotations

DEFAULT_LANG = "id"

TRANSLATIONS: dict[str, dict[str, str]] = {
    "id": {
        # Columns
        "date": "Tanggal",
        "item_name": "Nama Barang",
        "qty": "Qty",
        "price": "Harga",
        "total": "Total",
        "buyer": "Pembeli",
        "status": "Status",

        # Status labels
        "status_paid": "Lunas",
        "status_unpaid": "Belum Bayar",

        # Income report
        "income_report": "Laporan Penjualan",
        "income_sheet": "Income",
        "period": "Periode",
        "to": "s/d",

        # Ledger header block
        "ledger_sheet": "Laporan",
        "from_date": "Dari Tanggal",
        "to_date": "Sampai Tanggal",
        "printed_at": "Tanggal Cetak",
        "transaction_count": "Total Penjualan",
        "transactions": "Transaksi",
        "revenue": "Penjualan",
        "capital": "Total Modal",
        "expenses": "Pengeluaran",
        "net_income": "Pendapatan Bersih",
    },
    "en": {
        # Columns
        "date": "Date",
        "item_name": "Item",
        "qty": "Qty",
        "price": "Price",
        "total": "Total",
        "buyer": "Buyer",
        "status": "Status",

        # Status labels
        "status_paid": "Paid",
        "status_unpaid": "Unpaid",

        # Income report
        "income_report": "Income Report",
        "income_sheet": "Income",
        "period": "Period",
        "to": "to",

        # Ledger header block
        "ledger_sheet": "Ledger",
        "from_date": "From",
        "to_date": "To",
        "printed_at": "Printed",
        "transaction_count": "Total Sales",
        "transactions": "Transactions",
        "revenue": "Sales",
        "capital": "Total Capital",
        "expenses": "Expenses",
        "net_income": "Net Income",
    },
}


def t(lang: str, key: str) -> str:
    """Get translated label. Falls back to Indonesian."""
    return TRANSLATIONS.get(lang, TRANSLATIONS[DEFAULT_LANG]).get(
        key, TRANSLATIONS[DEFAULT_LANG].get(key, key)
    )
