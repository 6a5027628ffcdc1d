from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

from pos.billing.invoice import (
    amount_in_words,
    invoice_text,
    normalize_phone,
    render_invoice_html,
    share_url,
)


def _sale(product_name="Cotton Kurta"):
    product = SimpleNamespace(name=product_name) if product_name else None
    return SimpleNamespace(
        id=17,
        customer_name="Asha",
        customer_phone="9876543210",
        customer_address="12 MG Road",
        subtotal=Decimal("200.00"),
        discount=Decimal("20.00"),
        total_amount=Decimal("180.00"),
        created_at=datetime(2026, 3, 5, 14, 30),
        items=[
            SimpleNamespace(
                product=product,
                quantity_sold=2,
                sell_price=Decimal("100.00"),
                unit_discount=Decimal("10.00"),
                total_price=Decimal("180.00"),
            )
        ],
    )


def test_amount_in_words_whole_rupees():
    assert amount_in_words(Decimal("180")) == "One hundred and eighty rupees"


def test_amount_in_words_with_paise():
    words = amount_in_words(Decimal("180.50"))

    assert words.startswith("One hundred and eighty rupees and ")
    assert words.endswith("fifty paise")


def test_invoice_text_lists_items_and_totals():
    text = invoice_text(_sale())

    assert text.startswith("*GenZ Collection Invoice*")
    assert "*Customer:* Asha" in text
    assert "*Date:* 05/03/2026" in text
    assert "1. Cotton Kurta x2 @ ₹100.00 = ₹180.00" in text
    assert "*Discount:* ₹20.00" in text
    assert "*Total Amount:* ₹180.00" in text


def test_invoice_text_tolerates_deleted_product():
    assert "1. Deleted product x2" in invoice_text(_sale(product_name=None))


def test_normalize_phone_adds_country_code():
    assert normalize_phone("98765-43210") == "919876543210"
    assert normalize_phone("+91 98765 43210") == "919876543210"
    assert normalize_phone("12345") is None


def test_share_url_encodes_text():
    url = share_url("9876543210", "Total: ₹180 & thanks")

    assert url.startswith("https://wa.me/919876543210?text=")
    assert "%E2%82%B9180" in url
    assert "%26" in url
    assert " " not in url


def test_render_invoice_html_escapes_customer_fields():
    sale = _sale()
    sale.customer_name = "<b>Asha</b>"

    html = render_invoice_html(sale)

    assert "&lt;b&gt;Asha&lt;/b&gt;" in html
    assert "Invoice.No: 17" in html
    assert "One hundred and eighty rupees" in html
