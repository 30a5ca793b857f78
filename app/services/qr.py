# app/services/qr.py
import io

import qrcode

from app.models.user import User

def qr_value_for(user: User) -> str:
    # o mesmo valor que a portaria envia em /admin/attendance/scan-qr
    return user.email or str(user.id)

def qr_png_bytes(text: str) -> bytes:
    img = qrcode.make(text)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
