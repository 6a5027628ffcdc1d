"""Invoice assembly for completed sales: words, share text, printable HTML."""

import re
from decimal import Decimal, ROUND_HALF_UP
from html import escape
from typing import Optional
from urllib.parse import quote

from num2words import num2words

from pos.core.config import settings

WHATSAPP_BASE_URL = "https://wa.me"
MIN_PHONE_DIGITS = 10
# Left unescaped in the share text, everything else is percent-encoded.
URI_SAFE_CHARS = "-_.!~*'()"


def amount_in_words(amount, lang: Optional[str] = None) -> str:
    """``180.5`` -> ``"One hundred and eighty rupees and fifty paise"``."""
    lang = lang or settings.AMOUNT_WORDS_LANG
    amount = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    integer_part = int(amount)
    fractional_part = int((amount - integer_part) * 100)

    result = f"{num2words(integer_part, lang=lang)} {settings.CURRENCY_NAME}"
    if fractional_part > 0:
        result += f" and {num2words(fractional_part, lang=lang)} {settings.CURRENCY_SUBUNIT_NAME}"

    return result[:1].upper() + result[1:]


def _money(value) -> str:
    return f"{settings.CURRENCY_SYMBOL}{Decimal(str(value)):.2f}"


def _item_name(item) -> str:
    return item.product.name if item.product is not None else "Deleted product"


def invoice_text(sale) -> str:
    items_list = "\n".join(
        f"{index}. {_item_name(item)} x{item.quantity_sold} @ {_money(item.sell_price)} = {_money(item.total_price)}"
        for index, item in enumerate(sale.items, start=1)
    )

    return (
        f"*{settings.SHOP_NAME} Invoice*\n\n"
        f"*Customer:* {sale.customer_name or ''}\n"
        f"*Phone:* {sale.customer_phone or ''}\n"
        f"*Address:* {sale.customer_address or ''}\n"
        f"*Date:* {sale.created_at.strftime('%d/%m/%Y')}\n\n"
        f"*Items:*\n{items_list}\n\n"
        f"*Discount:* {_money(sale.discount)}\n"
        f"*Total Amount:* {_money(sale.total_amount)}\n\n"
        "Thank you for shopping with us! \n"
        "For any queries, reply to this message."
    )


def normalize_phone(phone: str) -> Optional[str]:
    digits = re.sub(r"\D", "", phone or "")
    if len(digits) == MIN_PHONE_DIGITS and not digits.startswith(settings.PHONE_COUNTRY_CODE):
        digits = settings.PHONE_COUNTRY_CODE + digits
    if len(digits) < MIN_PHONE_DIGITS:
        return None
    return digits


def share_url(phone: str, text: str) -> Optional[str]:
    """Prefilled WhatsApp link, or ``None`` when the phone number is unusable."""
    digits = normalize_phone(phone)
    if digits is None:
        return None
    return f"{WHATSAPP_BASE_URL}/{digits}?text={quote(text, safe=URI_SAFE_CHARS)}"


def render_invoice_html(sale) -> str:
    rows = "".join(
        "<tr>"
        f"<td>{index}</td>"
        f"<td>{escape(_item_name(item))}</td>"
        f"<td>{item.quantity_sold}</td>"
        f"<td>{escape(_money(item.sell_price))}</td>"
        f"<td>{escape(_money(item.unit_discount))}</td>"
        f"<td>{escape(_money(item.total_price))}</td>"
        "</tr>"
        for index, item in enumerate(sale.items, start=1)
    )

    return f"""<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <title>Invoice #{sale.id}</title>
    <style>
      body {{ font-family: Arial, sans-serif; }}
      .invoice {{ max-width: 800px; margin: 0 auto; padding: 20px; }}
      .top {{ display: flex; justify-content: space-between; }}
      .customer-info p {{ margin: 5px 0; }}
      table {{ width: 100%; border-collapse: collapse; }}
      thead {{ background-color: lightgrey; }}
      th, td {{ padding: 8px; text-align: left; border-bottom: 1px solid #ddd; }}
      .total {{ text-align: right; margin-top: 20px; font-weight: bold; }}
      @media print {{
        thead {{ -webkit-print-color-adjust: exact; print-color-adjust: exact; }}
      }}
    </style>
  </head>
  <body onload="window.print()">
    <div class="invoice">
      <div class="top">
        <h2>{escape(settings.SHOP_NAME)}</h2>
        <p>Date: {sale.created_at.strftime('%d/%m/%Y')}<br/>Invoice.No: {sale.id}</p>
      </div>
      <div class="customer-info">
        <h3>Bill To</h3>
        <p>{escape(sale.customer_name or '')}</p>
        <p>{escape(sale.customer_phone or '')}</p>
        <p>{escape(sale.customer_address or '')}</p>
      </div>
      <table>
        <thead>
          <tr><th>#</th><th>Item</th><th>Qty</th><th>Price</th><th>Discount</th><th>Amount</th></tr>
        </thead>
        <tbody>{rows}</tbody>
      </table>
      <div class="total">
        Subtotal: {escape(_money(sale.subtotal))}<br/>
        Discount: {escape(_money(sale.discount))}<br/>
        Total: {escape(_money(sale.total_amount))}
      </div>
      <p>Amount in words: {escape(amount_in_words(sale.total_amount))} only</p>
    </div>
  </body>
</html>
"""


def build_invoice(sale) -> dict:
    text = invoice_text(sale)
    return {
        "invoice_number": sale.id,
        "amount_in_words": amount_in_words(sale.total_amount),
        "text": text,
        "share_url": share_url(sale.customer_phone or "", text),
    }
