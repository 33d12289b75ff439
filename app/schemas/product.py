from pydantic import BaseModel
from typing import Optional

class ProductIn(BaseModel):
    name: str
    description: str = ""
    price: float = 0.0
    imageUrl: str = ""
    category: str = ""

class ProductOut(BaseModel):
    id: str
    name: str
    description: str = ""
    price: float = 0.0
    imageUrl: str = ""
    category: str = ""
    createdAt: Optional[str] = None
