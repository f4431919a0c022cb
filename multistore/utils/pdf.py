from reportlab.pdfgen import canvas
from reportlab.lib.pagesizes import A4
from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
import io
import qrcode
from multistore.core.config import settings
from multistore.models.order import Order
from multistore.utils.common import generate_invoice_number

ADDRESS_FIELDS = ("name", "address", "line1", "line2", "city", "state", "zipCode", "zip_code", "pincode", "phone")

def _money(value) -> str:
    return f"Rs.{value:.2f}"

def _qr_image(data: str) -> ImageReader:
    qr = qrcode.QRCode(version=1, box_size=2, border=1)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    qr_buffer = io.BytesIO()
    img.save(qr_buffer, format='PNG')
    qr_buffer.seek(0)
    return ImageReader(qr_buffer)

def generate_invoice_pdf(order: Order) -> io.BytesIO:
    """Render a one-page tax invoice for a single vendor order"""
    buffer = io.BytesIO()
    p = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4
    vendor = order.vendor

    # Header band
    p.setFillColor(colors.HexColor('#2c3e50'))
    p.rect(0, height - 80, width, 80, fill=1)

    p.setFillColor(colors.white)
    p.setFont("Helvetica-Bold", 22)
    p.drawString(30, height - 50, vendor.name if vendor else "Store")
    p.setFont("Helvetica-Bold", 18)
    p.drawRightString(width - 30, height - 35, "TAX INVOICE")
    p.setFont("Helvetica", 10)
    p.drawRightString(width - 30, height - 50, vendor.domain if vendor else "")

    # Invoice details
    p.setFillColor(colors.black)
    p.setFont("Helvetica", 10)
    details = [
        ("Invoice No.", generate_invoice_number(order.order_number)),
        ("Order No.", order.order_number),
        ("Order Date", order.created_at.strftime('%d.%m.%Y') if order.created_at else ""),
        ("Payment", (order.payment_method or "").upper()),
    ]
    y_pos = height - 110
    for label, value in details:
        p.drawString(30, y_pos, label)
        p.setFont("Helvetica-Bold", 10)
        p.drawString(130, y_pos, value)
        p.setFont("Helvetica", 10)
        y_pos -= 15

    p.drawImage(_qr_image(f"{order.order_number}|{order.total}"), width - 100, height - 170, width=70, height=70)

    # Ship to
    p.setFillColor(colors.lightgrey)
    p.rect(30, y_pos - 25, width - 60, 20, fill=1)
    p.setFillColor(colors.black)
    p.setFont("Helvetica-Bold", 11)
    p.drawString(40, y_pos - 19, "BILL TO / SHIP TO")

    p.setFont("Helvetica", 10)
    y_pos -= 40
    if order.customer:
        p.drawString(40, y_pos, f"{order.customer.full_name} <{order.customer.email}>")
        y_pos -= 15
    address = order.shipping_address or {}
    for field in ADDRESS_FIELDS:
        if address.get(field):
            p.drawString(40, y_pos, str(address[field]))
            y_pos -= 15

    # Items
    y_pos -= 15
    p.setFillColor(colors.lightgrey)
    p.rect(30, y_pos - 5, width - 60, 20, fill=1)
    p.setFillColor(colors.black)
    p.setFont("Helvetica-Bold", 9)
    p.drawString(40, y_pos, "Description")
    p.drawRightString(360, y_pos, "Qty")
    p.drawRightString(450, y_pos, "Unit Price")
    p.drawRightString(width - 40, y_pos, "Amount")

    p.setFont("Helvetica", 9)
    y_pos -= 20
    for item in order.items:
        p.drawString(40, y_pos, (item.product_name or "Item")[:45])
        p.drawRightString(360, y_pos, str(item.quantity))
        p.drawRightString(450, y_pos, _money(item.price))
        p.drawRightString(width - 40, y_pos, _money(item.price * item.quantity))
        y_pos -= 15
        if y_pos < 120:
            p.showPage()
            p.setFont("Helvetica", 9)
            y_pos = height - 60

    # Totals
    y_pos -= 10
    p.line(30, y_pos + 10, width - 30, y_pos + 10)
    tax_label = f"Tax ({settings.TAX_RATE * 100:.0f}%)"
    for label, value in (("Subtotal", order.subtotal), (tax_label, order.tax_amount),
                         ("Shipping", order.shipping_fee), ("Total", order.total)):
        p.setFont("Helvetica-Bold" if label == "Total" else "Helvetica", 10)
        p.drawRightString(450, y_pos - 5, label)
        p.drawRightString(width - 40, y_pos - 5, _money(value))
        y_pos -= 15

    p.setFont("Helvetica", 8)
    p.drawString(40, 50, "This is a computer generated invoice and does not require signature.")

    p.showPage()
    p.save()

    buffer.seek(0)
    return buffer
