# app/data/seed.py
from sqlalchemy.orm import Session

from app.data.database import SessionLocal
from app.data.models.user import UserModel
from app.repos.document_store import DocumentStore, SERVER_TIMESTAMP

DEMO_FARMER_ID = "farmer-demo"

DEMO_LISTINGS = [
    {"id": "crop-01", "cropName": "Organic Wheat", "retailPrice": 1.2, "wholesalePrice": 0.8, "retailQuantity": 500, "unit": "kg", "imageId": "market-wheat", "hasSampleBag": True},
    {"id": "crop-02", "cropName": "Basmati Rice", "retailPrice": 2.5, "wholesalePrice": 1.9, "retailQuantity": 300, "unit": "kg", "imageId": "market-rice", "hasSampleBag": False},
    {"id": "crop-03", "cropName": "Red Onions", "retailPrice": 0.9, "wholesalePrice": 0.6, "retailQuantity": 800, "unit": "kg", "imageId": "market-onions", "hasSampleBag": True},
]


def seed(db: Session | None = None) -> bool:
    own_session = db is None
    db = db or SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.get(UserModel, DEMO_FARMER_ID):
            return False

        db.add(UserModel(id=DEMO_FARMER_ID, display_name="Demo Farmer", role="farmer"))
        db.commit()

        store = DocumentStore(db)
        listings = store.collection("cropListings")
        batch = store.batch()
        for listing in DEMO_LISTINGS:
            data = {k: v for k, v in listing.items() if k != "id"}
            batch.set(
                listings.document(listing["id"]),
                {**data, "userId": DEMO_FARMER_ID, "createdAt": SERVER_TIMESTAMP},
            )
        batch.commit()
        return True
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    seed()
