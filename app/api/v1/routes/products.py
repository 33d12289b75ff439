import uuid
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.product import Product
from app.schemas.product import ProductIn, ProductOut

router = APIRouter(tags=["products"])

def _product_out(p: Product) -> ProductOut:
    return ProductOut(
        id=p.id,
        name=p.name,
        description=p.description or "",
        price=p.price or 0.0,
        imageUrl=p.image_url or "",
        category=p.category or "",
        createdAt=p.created_at.isoformat() if p.created_at else None,
    )

@router.get("/products", response_model=list[ProductOut])
def list_products(db: Session = Depends(get_db)):
    items = db.query(Product).order_by(Product.created_at.asc()).all()
    return [_product_out(p) for p in items]

@router.post("/products", response_model=ProductOut)
def create_product(body: ProductIn, db: Session = Depends(get_db)):
    p = Product(
        id=str(uuid.uuid4()),
        name=body.name,
        description=body.description,
        price=body.price,
        image_url=body.imageUrl,
        category=body.category,
    )
    db.add(p)
    db.commit()
    db.refresh(p)
    return _product_out(p)

@router.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    p = db.get(Product, product_id)
    if not p:
        raise HTTPException(status_code=404, detail="Not found")
    return _product_out(p)
