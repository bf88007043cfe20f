# Seed catalog used by the debug endpoints. Prices are in Indian Rupees.

STARTER_PRODUCTS = [
    {
        "name": "Classic White T-Shirt",
        "description": "Comfortable cotton t-shirt perfect for everyday wear",
        "price": 1499,
        "images": ["/shop/products/tshirt-1/p (1).jpeg"],
        "category": "T-Shirts",
        "stock_quantity": 50,
        "sku": "TSHIRT-001",
        "is_featured": True,
        "is_active": True,
    },
    {
        "name": "Premium Cotton Shirt",
        "description": "High-quality cotton shirt for formal occasions",
        "price": 2999,
        "images": ["/shop/products/shirt-1/p (1).jpeg"],
        "category": "Shirts",
        "stock_quantity": 30,
        "sku": "SHIRT-001",
        "is_featured": True,
        "is_active": True,
    },
    {
        "name": "Slim Fit Jeans",
        "description": "Modern slim fit jeans with stretch comfort",
        "price": 3999,
        "images": ["/shop/products/jeans-1/p (1).jpeg"],
        "category": "Jeans",
        "stock_quantity": 25,
        "sku": "JEANS-001",
        "is_featured": False,
        "is_active": True,
    },
    {
        "name": "Graphic Print T-Shirt",
        "description": "Stylish graphic print t-shirt with unique design",
        "price": 1799,
        "images": ["/shop/products/tshirt-2/p (1).jpeg"],
        "category": "T-Shirts",
        "stock_quantity": 40,
        "sku": "TSHIRT-002",
        "is_featured": False,
        "is_active": True,
    },
    {
        "name": "Casual Denim Shirt",
        "description": "Versatile denim shirt for casual and smart casual looks",
        "price": 3499,
        "images": ["/shop/products/shirt-2/p (1).jpeg"],
        "category": "Shirts",
        "stock_quantity": 20,
        "sku": "SHIRT-002",
        "is_featured": False,
        "is_active": True,
    },
]


def _images(folder: str, count: int) -> list:
    if count == 1:
        return [f"/shop/products/{folder}/p.jpeg"]
    return [f"/shop/products/{folder}/p ({i}).jpeg" for i in range(1, count + 1)]


# (product fields, color ids, size ids); ids refer to the seeded colors/sizes tables
CATALOG = [
    ({"name": "CLASSIC WHITE TEE", "description": "Premium cotton classic white t-shirt with perfect fit and comfort.",
      "price": 1200, "images": _images("tshirt-1", 4), "category": "T-SHIRTS", "stock_quantity": 50,
      "sku": "TS001", "is_featured": True}, [1, 2], [2, 3, 4]),
    ({"name": "STRIPED GRAPHIC TEE", "description": "Stylish striped graphic t-shirt with bold design and comfortable fit.",
      "price": 1400, "images": _images("tshirt-2", 4), "category": "T-SHIRTS", "stock_quantity": 30,
      "sku": "TS002", "is_featured": False}, [7, 3], [2, 3, 4, 5]),
    ({"name": "PREMIUM COTTON TEE", "description": "Ultra-premium cotton t-shirt with exceptional quality and comfort.",
      "price": 1600, "images": _images("tshirt-3", 4), "category": "T-SHIRTS", "stock_quantity": 0,
      "sku": "TS003", "is_featured": False}, [1, 2, 4], [2, 3, 4, 5]),
    ({"name": "MINIMALIST TEE", "description": "Clean and minimalist design t-shirt for everyday wear.",
      "price": 1100, "images": _images("tshirt-4", 1), "category": "T-SHIRTS", "stock_quantity": 25,
      "sku": "TS004", "is_featured": False}, [1, 2], [2, 3, 4]),
    ({"name": "LINEN CASUAL SHIRT", "description": "Comfortable linen casual shirt perfect for any occasion.",
      "price": 2200, "images": _images("shirt-1", 3), "category": "SHIRTS", "stock_quantity": 20,
      "sku": "SH001", "is_featured": True}, [13, 1, 4], [2, 3, 4, 5]),
    ({"name": "FORMAL OXFORD SHIRT", "description": "Classic Oxford shirt with formal design and professional look.",
      "price": 2500, "images": _images("shirt-2", 4), "category": "SHIRTS", "stock_quantity": 15,
      "sku": "SH002", "is_featured": False}, [1, 4, 9], [2, 3, 4, 5]),
    ({"name": "PREMIUM DENIM JEANS", "description": "Premium denim jeans with perfect fit and modern styling.",
      "price": 3200, "images": _images("jeans-1", 3), "category": "JEANS", "stock_quantity": 12,
      "sku": "JN001", "is_featured": True}, [4, 2, 6], [10, 11, 12, 13]),
]
