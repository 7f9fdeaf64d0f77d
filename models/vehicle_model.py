from pydantic import BaseModel
from typing import Optional

class VehicleModel(BaseModel):
    id: str
    name: str
    type: str
    capacity: int
    price_per_day: float
    image_url: Optional[str] = None
    active: bool = True

    class Config:
        json_schema_extra = {
            "example": {
                "id": "toyota-axio",
                "name": "Toyota Axio",
                "type": "Sedan",
                "capacity": 4,
                "price_per_day": 45.0,
                "image_url": "/images/toyota-axio.jpg",
                "active": True
            }
        }
