import hashlib
import time

from app.core.config import settings


def sign_upload_params(params: dict, api_secret: str) -> str:
    """Signed-upload scheme of the image host: sha1("k1=v1&k2=v2" + secret), keys sorted, empty values dropped."""
    to_sign = "&".join(f"{k}={v}" for k, v in sorted(params.items()) if v not in (None, ""))
    return hashlib.sha1((to_sign + api_secret).encode("utf-8")).hexdigest()


def generate_upload_signature(timestamp: int | None = None) -> dict:
    if not settings.UPLOAD_API_SECRET:
        raise ValueError("UPLOAD_API_SECRET is not configured")
    ts = int(timestamp if timestamp is not None else time.time())
    signature = sign_upload_params({"timestamp": ts, "upload_preset": settings.UPLOAD_PRESET}, settings.UPLOAD_API_SECRET)
    return {
        "timestamp": ts,
        "signature": signature,
        "apiKey": settings.UPLOAD_API_KEY,
        "cloudName": settings.UPLOAD_CLOUD_NAME,
        "uploadPreset": settings.UPLOAD_PRESET,
    }
