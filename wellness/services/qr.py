import io, secrets

import qrcode  # type: ignore

TOKEN_BYTES = 16

def new_registration_token() -> str:
    # opaco para o core; unicidade garantida pela constraint em registrations.token
    return secrets.token_hex(TOKEN_BYTES)

def render_qr_png(token: str) -> bytes:
    img = qrcode.make(token)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
