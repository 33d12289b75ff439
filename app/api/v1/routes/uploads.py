from fastapi import APIRouter, HTTPException
from app.services.upload_signature import generate_upload_signature

router = APIRouter(tags=["uploads"])

@router.post("/generate-signature")
def generate_signature():
    """Signature for a direct browser upload of a product image."""
    try:
        return generate_upload_signature()
    except ValueError as e:
        raise HTTPException(status_code=503, detail=str(e))
