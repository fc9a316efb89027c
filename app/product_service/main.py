# product_service/main.py
from fastapi import FastAPI, HTTPException

app = FastAPI(title="Shop Catalog Service (dev mock)")


PRODUCTS = {
    "prod-01": {"id": "prod-01", "price": 25.99, "category": "Seeds", "imageId": "shop-seeds", "quantity": 500, "unit": "kg"},
    "prod-02": {"id": "prod-02", "price": 45.50, "category": "Fertilizers", "imageId": "shop-fertilizer", "quantity": 200, "unit": "bags"},
    "prod-03": {"id": "prod-03", "price": 15000.00, "category": "Heavy Machinery", "imageId": "shop-tractor", "quantity": 5, "unit": "units"},
    "prod-04": {"id": "prod-04", "price": 19.99, "category": "Tools", "imageId": "shop-tools", "quantity": 150, "unit": "units"},
    "prod-05": {"id": "prod-05", "price": 32.00, "category": "Pesticides", "imageId": "shop-fertilizer", "quantity": 120, "unit": "liters"},
    "prod-06": {"id": "prod-06", "price": 35.99, "category": "Seeds", "imageId": "shop-seeds", "quantity": 50, "unit": "kg"},
}

@app.get("/products")
def list_products():
    return list(PRODUCTS.values())

@app.get("/products/{product_id}")
def get_product(product_id: str):
    product = PRODUCTS.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
